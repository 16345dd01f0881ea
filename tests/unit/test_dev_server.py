# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from pathlib import Path

from fastapi.testclient import TestClient

from spriteify.cache import CompilationCache
from spriteify.config import SpriteConfig
from spriteify.dev_server import create_app, module_url
from spriteify.module_code import create_module_code, weak_etag
from spriteify.orchestrator import IncrementalOrchestrator

HOME_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
    '<path d="M3 12l9-9 9 9"/></svg>'
)


def _client(tmp_path: Path, *names: str) -> TestClient:
    icons = tmp_path / "icons"
    icons.mkdir()
    for name in names:
        (icons / name).write_text(HOME_SVG, encoding="utf-8")
    orchestrator = IncrementalOrchestrator(
        config=SpriteConfig(input_dir=Path("icons"), output_dir=Path("out"), cwd=tmp_path),
        cache=CompilationCache(),
    )
    return TestClient(create_app(orchestrator))


def test_dev_001_serves_module_with_cache_headers(tmp_path: Path) -> None:
    client = _client(tmp_path, "home.svg")

    response = client.get(module_url("__svg__icons__dom__"))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert response.headers["cache-control"] == "no-cache"
    assert response.headers["etag"] == weak_etag(response.text)
    assert "loadSvg" in response.text
    assert not (tmp_path / "out").exists()


def test_dev_002_matching_etag_yields_not_modified(tmp_path: Path) -> None:
    client = _client(tmp_path, "home.svg")
    etag = client.get(module_url("__svg__icons__dom__")).headers["etag"]

    response = client.get(module_url("__svg__icons__dom__"), headers={"If-None-Match": etag})

    assert response.status_code == 304


def test_dev_003_identifier_collision_yields_server_error(tmp_path: Path) -> None:
    client = _client(tmp_path, "home.svg", "home_.svg")

    response = client.get(module_url("__svg__icons__dom__"))

    assert response.status_code == 500
    assert "Error generating SVG sprite" in response.text


def test_dev_004_module_code_places_container_last_by_default() -> None:
    code = create_module_code(html="<symbol id=\"a\" />", dom_id="icons", inject="last")

    assert "body.appendChild(svgDom);" in code
    assert "document.readyState === 'loading'" in code
    assert weak_etag(code).startswith('W/"')
    assert weak_etag(code) == weak_etag(code)
    assert weak_etag(code) != weak_etag(code + " ")
