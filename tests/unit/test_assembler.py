# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
import os
from pathlib import Path

import pytest

from spriteify.assembler import (
    DYNAMIC_DEFS_ID,
    STATIC_DEFS_ID,
    IdentifierCollisionError,
    SpriteAssembler,
)
from spriteify.manifest import generate_manifest
from spriteify.model import CompiledSymbol
from spriteify.output import ArtifactWriteError, remove_if_exists, write_if_changed


def _symbol(
    identifier: str,
    file_path: str,
    *,
    is_dynamic: bool = False,
    defs: tuple[str, ...] = (),
    styles: str | None = None,
) -> CompiledSymbol:
    return CompiledSymbol(
        identifier=identifier,
        file_path=file_path,
        markup=f'<symbol id="{identifier}"><path d="M0 0" /></symbol>',
        normalized_markup=f'<symbolid="{identifier}"><pathd="M00"/></symbol>',
        content_hash=identifier,
        is_dynamic=is_dynamic,
        extracted_defs=defs,
        extracted_styles=styles,
    )


def test_asm_001_static_and_dynamic_symbols_render_in_separate_sections() -> None:
    assembler = SpriteAssembler()
    documents = assembler.assemble(
        [_symbol("alert", "alert.svg", is_dynamic=True), _symbol("home", "home.svg")]
    )

    assert len(documents) == 1
    rendered = assembler.render(documents[0])
    lines = rendered.splitlines()
    static_start = lines.index(f'<defs id="{STATIC_DEFS_ID}">')
    dynamic_start = lines.index(f'<defs id="{DYNAMIC_DEFS_ID}">')
    assert lines[static_start + 1].startswith('<symbol id="home"')
    assert lines[dynamic_start + 1].startswith('<symbol id="alert"')
    assert lines[0] == '<?xml version="1.0" encoding="UTF-8"?>'
    assert lines[-1] == "</svg>"
    assert rendered.endswith("\n")


def test_asm_002_definitions_and_styles_are_deduplicated_in_first_seen_order() -> None:
    assembler = SpriteAssembler()
    documents = assembler.assemble(
        [
            _symbol("a", "a.svg", defs=('<clipPath id="c" />', '<mask id="m" />'), styles=".x{}"),
            _symbol("b", "b.svg", defs=('<mask id="m" />', '<filter id="f" />'), styles=".x{}"),
            _symbol("c", "c.svg", styles=".y{fill:red}"),
        ]
    )
    document = documents[0]

    assert document.definitions == (
        '<clipPath id="c" />',
        '<mask id="m" />',
        '<filter id="f" />',
    )
    assert document.styles == ".x{}\n.y{fill:red}"
    rendered = assembler.render(document)
    assert rendered.index("<style>") < rendered.index(f'<defs id="{STATIC_DEFS_ID}">')


def test_asm_003_identifier_collision_reports_both_paths() -> None:
    assembler = SpriteAssembler()

    with pytest.raises(IdentifierCollisionError) as exc_info:
        assembler.assemble([_symbol("foo", "foo.svg"), _symbol("foo", "foo_.svg")])

    assert exc_info.value.first_path == "foo.svg"
    assert exc_info.value.second_path == "foo_.svg"
    assert "foo_.svg" in str(exc_info.value)


def test_asm_004_grouped_mode_partitions_by_parent_directory() -> None:
    assembler = SpriteAssembler()
    documents = assembler.assemble(
        [
            _symbol("save", "actions/save.svg"),
            _symbol("menu", "nav/menu.svg"),
            _symbol("logo", "logo.svg"),
            _symbol("menu", "actions/menu.svg"),
        ],
        grouped=True,
        default_group="icons",
    )

    assert [document.group for document in documents] == ["actions", "icons", "nav"]
    assert documents[0].identifiers == ["save", "menu"]
    assert documents[1].identifiers == ["logo"]
    assert documents[2].identifiers == ["menu"]


def test_asm_005_render_inner_omits_wrapper() -> None:
    assembler = SpriteAssembler()
    document = assembler.assemble([_symbol("home", "home.svg")])[0]

    inner = assembler.render_inner(document)

    assert inner.startswith(f'<defs id="{STATIC_DEFS_ID}">')
    assert "<?xml" not in inner
    assert "<svg" not in inner


def test_asm_006_write_only_when_content_changes(tmp_path: Path) -> None:
    assembler = SpriteAssembler()
    document = assembler.assemble([_symbol("home", "home.svg")])[0]
    target = tmp_path / "out" / "sprite.svg"

    assert assembler.write(document, target) is True
    first_mtime = os.stat(target).st_mtime_ns
    assert assembler.write(document, target) is False
    assert os.stat(target).st_mtime_ns == first_mtime


def test_out_001_write_errors_name_the_path(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    target = blocker / "sprite.svg"

    with pytest.raises(ArtifactWriteError) as exc_info:
        write_if_changed(target, "<svg />")

    assert exc_info.value.path == target
    assert isinstance(exc_info.value.__cause__, OSError)


def test_out_002_remove_if_exists_tolerates_missing_files(tmp_path: Path) -> None:
    target = tmp_path / "types.ts"
    target.write_text("x", encoding="utf-8")

    assert remove_if_exists(target) is True
    assert remove_if_exists(target) is False


def test_man_001_manifest_lists_names_as_union_and_runtime_list() -> None:
    manifest = generate_manifest(["home", "alert", "home"])

    assert 'export type IconName =\n  | "home"\n  | "alert";' in manifest
    assert 'export const iconNames = ["home", "alert"] as const;' in manifest
    assert "export const isIconName = (value: string): value is IconName =>" in manifest


def test_man_002_namespace_prefixes_type_and_list_names() -> None:
    manifest = generate_manifest(["menu"], namespace="nav-bar")

    assert 'export type NavBarIconName =\n  | "menu";' in manifest
    assert 'export const NavBarIconNames = ["menu"] as const;' in manifest
    assert "export type IconName" not in manifest


def test_man_003_empty_manifest_uses_never() -> None:
    manifest = generate_manifest([])

    assert "export type IconName = never;" in manifest
    assert "export const iconNames = [] as const;" in manifest
