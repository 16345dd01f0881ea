# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from typing import Any, Mapping

import pytest

from spriteify.compiler import SymbolCompileError, SymbolCompiler
from spriteify.naming import derive_identifier, to_camel_case, to_title_case
from spriteify.normalizer import content_digest
from spriteify.optimizer import OptimizationError

HOME_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" version="1.1" '
    'viewBox="0 0 24 24"><path d="M3 12l9-9 9 9"/></svg>'
)

ALERT_SVG = "\n".join(
    [
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">',
        "  <defs>",
        '    <linearGradient id="fade"><stop offset="0" stop-color="red"/></linearGradient>',
        "  </defs>",
        "  <style>.a { fill: url(#fade); }</style>",
        '  <circle class="a" cx="12" cy="12" r="10"/>',
        "</svg>",
    ]
)


class _FailingOptimizer:
    def optimize(self, markup: str, config: Mapping[str, Any]) -> str:
        raise OptimizationError("boom")


class _RecordingOptimizer:
    def __init__(self) -> None:
        self.configs: list[dict[str, Any]] = []

    def optimize(self, markup: str, config: Mapping[str, Any]) -> str:
        self.configs.append(dict(config))
        return markup.replace('r="10"', 'r="9"')


def test_cmp_001_compiler_retags_root_and_strips_sizing_attributes() -> None:
    symbol = SymbolCompiler().compile("home.svg", HOME_SVG, "home")

    assert symbol.markup == (
        '<symbol id="home" viewBox="0 0 24 24"><path d="M3 12l9-9 9 9" /></symbol>'
    )
    assert symbol.identifier == "home"
    assert symbol.file_path == "home.svg"
    assert symbol.is_dynamic is False
    assert symbol.extracted_defs == ()
    assert symbol.extracted_styles is None


def test_cmp_002_compiler_lifts_defs_extracts_styles_and_flags_dynamic() -> None:
    symbol = SymbolCompiler().compile("alert.svg", ALERT_SVG, "alert")

    assert symbol.is_dynamic is True
    assert symbol.extracted_defs == (
        '<linearGradient id="fade"><stop offset="0" stop-color="red" /></linearGradient>',
    )
    assert symbol.extracted_styles == ".a { fill: url(#fade); }"
    assert "<defs" not in symbol.markup
    assert "<style" not in symbol.markup
    assert symbol.markup.startswith('<symbol id="alert"')


def test_cmp_003_content_hash_ignores_whitespace_and_identifier() -> None:
    compiler = SymbolCompiler()
    compact_svg = compiler.compile("a.svg", HOME_SVG, "a")
    spaced_svg = compiler.compile(
        "b.svg", HOME_SVG.replace("><", ">\n    <"), "b"
    )
    changed_svg = compiler.compile("c.svg", HOME_SVG.replace("9 9", "8 8"), "c")

    assert compact_svg.content_hash == spaced_svg.content_hash
    assert compact_svg.content_hash != changed_svg.content_hash


def test_cmp_004_compiler_rejects_malformed_markup_and_missing_svg() -> None:
    compiler = SymbolCompiler()

    with pytest.raises(SymbolCompileError, match="Malformed markup"):
        compiler.compile("broken.svg", "<svg><path></svg>", "broken")
    with pytest.raises(SymbolCompileError, match="No <svg> element"):
        compiler.compile("note.svg", "<note><body/></note>", "note")


def test_cmp_005_compiler_reports_optimizer_failure_as_compile_error() -> None:
    compiler = SymbolCompiler(optimizer=_FailingOptimizer())

    with pytest.raises(SymbolCompileError, match="Optimizer failed: boom"):
        compiler.compile("home.svg", HOME_SVG, "home")


def test_cmp_006_compiler_passes_optimizer_config_and_uses_result() -> None:
    optimizer = _RecordingOptimizer()
    compiler = SymbolCompiler(optimizer=optimizer, optimizer_config={"precision": 3})

    symbol = compiler.compile("alert.svg", ALERT_SVG, "alert")

    assert optimizer.configs == [{"precision": 3}]
    assert 'r="9"' in symbol.markup


def test_cmp_007_compiler_drops_editor_namespaces_and_keeps_xlink() -> None:
    markup = (
        '<svg xmlns="http://www.w3.org/2000/svg" '
        'xmlns:xlink="http://www.w3.org/1999/xlink" '
        'xmlns:inkscape="http://www.inkscape.org/namespaces/inkscape" '
        'inkscape:version="1.0" viewBox="0 0 10 10">'
        '<inkscape:grid/><use xlink:href="#dot"/></svg>'
    )

    symbol = SymbolCompiler().compile("use.svg", markup, "use")

    assert symbol.markup == '<symbol id="use" viewBox="0 0 10 10"><use xlink:href="#dot" /></symbol>'


def test_cmp_008_dynamic_tags_are_configurable() -> None:
    compiler = SymbolCompiler(dynamic_tags=("mask",))
    masked = (
        '<svg xmlns="http://www.w3.org/2000/svg"><mask id="m"/><rect width="1"/></svg>'
    )

    assert compiler.compile("m.svg", masked, "m").is_dynamic is True
    assert compiler.compile("alert.svg", ALERT_SVG, "alert").is_dynamic is False


def test_cmp_009_content_digest_ignores_formatting_but_keeps_value_spacing() -> None:
    assert content_digest("<a>\n  <b/>\n</a>") == content_digest("<a><b/></a>")
    assert content_digest('<a x="1"/>') != content_digest('<a x="2"/>')
    assert content_digest('<path d="M1 2"/>') != content_digest('<path d="M12"/>')
    assert content_digest('<path  d = "M1  2" />') == content_digest('<path d="M1 2"/>')


def test_name_001_camel_case_joins_delimited_words() -> None:
    assert to_camel_case("arrow-left") == "arrowLeft"
    assert to_camel_case("another_test_string") == "anotherTestString"
    assert to_camel_case("Home") == "home"
    assert to_camel_case("foo_") == "foo"


def test_name_002_title_case_and_identifier_templates() -> None:
    assert to_title_case("nav") == "Nav"
    assert to_title_case("nav-bar") == "NavBar"
    assert derive_identifier("nav/arrow-left.svg") == "arrowLeft"
    assert derive_identifier("nav/arrow-left.svg", "icon-[name]") == "icon-arrow-left"
