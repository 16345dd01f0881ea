# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from pathlib import Path

import pytest

from spriteify.config import SpriteConfig
from spriteify.factory import build_compiler
from spriteify.optimizer import OptimizationError
from spriteify.optimizers import ScourOptimizer

ANNOTATED_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">'
    "<!-- drawn by hand -->"
    "<title>Home</title>"
    "<metadata>exported</metadata>"
    '<path d="M3 12l9-9 9 9"/></svg>'
)


def _config(**overrides: object) -> SpriteConfig:
    return SpriteConfig(
        input_dir=Path("icons"),
        output_dir=Path("out"),
        **overrides,  # type: ignore[arg-type]
    )


def test_opt_001_optimizing_compiler_strips_metadata_titles_and_sizing() -> None:
    compiler = build_compiler(_config(optimize=True))

    symbol = compiler.compile("home.svg", ANNOTATED_SVG, "home")

    assert symbol.markup.startswith('<symbol id="home"')
    assert 'viewBox="0 0 24 24"' in symbol.markup
    assert "width=" not in symbol.markup
    assert "height=" not in symbol.markup
    assert "<metadata" not in symbol.markup
    assert "<title" not in symbol.markup
    assert "<path" in symbol.markup


def test_opt_002_compiler_without_optimize_keeps_markup_elements() -> None:
    compiler = build_compiler(_config())

    symbol = compiler.compile("home.svg", ANNOTATED_SVG, "home")

    assert "<metadata>exported</metadata>" in symbol.markup
    assert "<title>Home</title>" in symbol.markup


def test_opt_003_scour_options_merge_over_defaults() -> None:
    optimizer = ScourOptimizer()

    stripped = optimizer.optimize(ANNOTATED_SVG, {})
    kept = optimizer.optimize(ANNOTATED_SVG, {"strip_comments": False})

    assert "drawn by hand" not in stripped
    assert "<!-- drawn by hand -->" in kept
    assert "<?xml" not in kept


def test_opt_004_optimizer_config_reaches_scour_through_the_compiler() -> None:
    compiler = build_compiler(
        _config(optimize=True, optimizer_config={"remove_descriptive_elements": False})
    )

    symbol = compiler.compile("home.svg", ANNOTATED_SVG, "home")

    assert "<title>Home</title>" in symbol.markup
    assert "<metadata" not in symbol.markup


def test_opt_005_unparseable_markup_raises_optimization_error() -> None:
    with pytest.raises(OptimizationError):
        ScourOptimizer().optimize("<svg><path></svg>", {})
