# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Assemble compiled symbols into sprite documents."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable
from xml.sax.saxutils import escape

from spriteify.model import CompiledSymbol, group_name
from spriteify.normalizer import SVG_NAMESPACE, XLINK_NAMESPACE
from spriteify.output import write_if_changed

logger = logging.getLogger(__name__)

XML_DECLARATION: str = '<?xml version="1.0" encoding="UTF-8"?>'
SHARED_DEFS_ID: str = "shared-sprite-defs"
STATIC_DEFS_ID: str = "static-sprite-defs"
DYNAMIC_DEFS_ID: str = "dynamic-sprite-defs"


class IdentifierCollisionError(RuntimeError):
    """Represent two source files resolving to the same symbol identifier."""

    def __init__(self, identifier: str, first_path: str, second_path: str) -> None:
        super().__init__(
            f"Identifier '{identifier}' is produced by both {first_path} and {second_path}"
        )
        self.identifier = identifier
        self.first_path = first_path
        self.second_path = second_path


@dataclass(frozen=True)
class SpriteDocument:
    """Represent one assembled sprite.

    Attributes:
        group: Group name in grouped mode, ``None`` for the single sprite.
        symbols: Symbols in source scan order.
        definitions: Deduplicated definition nodes in first-seen order.
        styles: Aggregated style text, if any symbol carried styles.
    """

    group: str | None
    symbols: tuple[CompiledSymbol, ...]
    definitions: tuple[str, ...]
    styles: str | None

    @property
    def static_symbols(self) -> list[CompiledSymbol]:
        return [symbol for symbol in self.symbols if not symbol.is_dynamic]

    @property
    def dynamic_symbols(self) -> list[CompiledSymbol]:
        return [symbol for symbol in self.symbols if symbol.is_dynamic]

    @property
    def identifiers(self) -> list[str]:
        return [symbol.identifier for symbol in self.symbols]


class SpriteAssembler:
    """Merge compiled symbols into sprite documents and render them."""

    def assemble(
        self,
        symbols: list[CompiledSymbol],
        grouped: bool = False,
        default_group: str = "",
    ) -> list[SpriteDocument]:
        """Build sprite documents from compiled symbols.

        Args:
            symbols: Compiled symbols in source scan order.
            grouped: Partition symbols by immediate parent directory.
            default_group: Group name for files at the scanned root.

        Returns:
            One document, or one per group ordered by group name.

        Raises:
            IdentifierCollisionError: If two symbols of one document share an identifier.
        """
        if not grouped:
            return [self._build_document(group=None, symbols=symbols)]

        by_group: dict[str, list[CompiledSymbol]] = {}
        for symbol in symbols:
            by_group.setdefault(group_name(symbol.file_path, default_group), []).append(symbol)
        return [
            self._build_document(group=group, symbols=by_group[group])
            for group in sorted(by_group)
        ]

    def render(self, document: SpriteDocument) -> str:
        """Serialize a document as a standalone sprite file."""
        lines = [
            XML_DECLARATION,
            f'<svg xmlns="{SVG_NAMESPACE}" xmlns:xlink="{XLINK_NAMESPACE}" style="display: none;">',
            *self._body_lines(document),
            "</svg>",
        ]
        return "\n".join(lines) + "\n"

    def render_inner(self, document: SpriteDocument) -> str:
        """Serialize the content of a document for embedding in a container element."""
        return "".join(self._body_lines(document))

    def write(self, document: SpriteDocument, output_path: Path) -> bool:
        """Write a rendered document when it differs from the file on disk.

        Returns:
            ``True`` when the file was written.

        Raises:
            ArtifactWriteError: If the file cannot be written.
        """
        return write_if_changed(output_path, self.render(document))

    def _build_document(
        self, group: str | None, symbols: list[CompiledSymbol]
    ) -> SpriteDocument:
        owners: dict[str, str] = {}
        for symbol in symbols:
            owner = owners.get(symbol.identifier)
            if owner is not None:
                raise IdentifierCollisionError(symbol.identifier, owner, symbol.file_path)
            owners[symbol.identifier] = symbol.file_path

        definitions = _unique(
            definition for symbol in symbols for definition in symbol.extracted_defs
        )
        style_blocks = _unique(
            symbol.extracted_styles for symbol in symbols if symbol.extracted_styles
        )
        document = SpriteDocument(
            group=group,
            symbols=tuple(symbols),
            definitions=tuple(definitions),
            styles="\n".join(style_blocks) if style_blocks else None,
        )
        logger.debug(
            f"Sprite document assembled (group={group} static={len(document.static_symbols)} "
            f"dynamic={len(document.dynamic_symbols)} defs={len(definitions)})"
        )
        return document

    def _body_lines(self, document: SpriteDocument) -> list[str]:
        lines: list[str] = []
        if document.styles:
            lines.append(f"<style>{escape(document.styles)}</style>")
        for section_id, fragments in (
            (SHARED_DEFS_ID, list(document.definitions)),
            (STATIC_DEFS_ID, [symbol.markup for symbol in document.static_symbols]),
            (DYNAMIC_DEFS_ID, [symbol.markup for symbol in document.dynamic_symbols]),
        ):
            if not fragments:
                continue
            lines.append(f'<defs id="{section_id}">')
            lines.extend(fragments)
            lines.append("</defs>")
        return lines


def _unique(values: Iterable[str]) -> list[str]:
    """Return values with exact duplicates removed, keeping first-seen order."""
    return list(dict.fromkeys(values))
