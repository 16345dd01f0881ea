# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Compile single icon files into embeddable sprite symbols."""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Iterator, Mapping

from spriteify.config import DEFAULT_DYNAMIC_TAGS
from spriteify.model import CompiledSymbol
from spriteify.normalizer import compact, content_digest, parse_markup, serialize
from spriteify.optimizer import OptimizationError, Optimizer

logger = logging.getLogger(__name__)

SYMBOL_TAG: str = "symbol"
STRIPPED_ATTRIBUTES: tuple[str, ...] = ("id", "width", "height", "version")


class SymbolCompileError(RuntimeError):
    """Represent a recoverable compile failure for one file."""


class SymbolCompiler:
    """Turn raw icon markup into a normalized ``<symbol>`` fragment."""

    def __init__(
        self,
        optimizer: Optimizer | None = None,
        optimizer_config: Mapping[str, Any] | None = None,
        dynamic_tags: tuple[str, ...] = DEFAULT_DYNAMIC_TAGS,
    ) -> None:
        """Initialize the compiler.

        Args:
            optimizer: Optional optimizer run before parsing.
            optimizer_config: Options handed to ``optimizer`` on every call.
            dynamic_tags: Element names that classify a symbol as dynamic.
        """
        self._optimizer = optimizer
        self._optimizer_config = dict(optimizer_config or {})
        self._dynamic_tags = frozenset(dynamic_tags)

    def compile(self, file_path: str, raw_markup: str, identifier: str) -> CompiledSymbol:
        """Compile one icon file.

        Args:
            file_path: Source path relative to the scanned root.
            raw_markup: File content.
            identifier: Symbol id to assign.

        Returns:
            The compiled symbol.

        Raises:
            SymbolCompileError: If optimization fails, the markup is malformed,
                or no ``<svg>`` element is present.
        """
        markup = self._optimize(file_path=file_path, markup=raw_markup)
        try:
            root = parse_markup(markup)
        except ET.ParseError as exc:
            raise SymbolCompileError(f"Malformed markup: {exc}") from exc

        svg = root if root.tag == "svg" else root.find(".//svg")
        if svg is None:
            raise SymbolCompileError("No <svg> element found.")

        for attribute in STRIPPED_ATTRIBUTES:
            svg.attrib.pop(attribute, None)
        is_dynamic = any(
            element.tag in self._dynamic_tags for element in svg.iter() if element is not svg
        )
        definitions = self._lift_definitions(svg)
        styles = self._extract_styles(svg)
        svg.tag = SYMBOL_TAG

        normalized_markup = compact(serialize(svg) + "".join(definitions) + (styles or ""))
        content_hash = content_digest(normalized_markup)

        attributes = dict(svg.attrib)
        svg.attrib.clear()
        svg.set("id", identifier)
        svg.attrib.update(attributes)

        logger.debug(
            f"Compiled symbol (file_path={file_path} identifier={identifier} "
            f"dynamic={is_dynamic} defs={len(definitions)})"
        )
        return CompiledSymbol(
            identifier=identifier,
            file_path=file_path,
            markup=serialize(svg),
            normalized_markup=normalized_markup,
            content_hash=content_hash,
            is_dynamic=is_dynamic,
            extracted_defs=tuple(definitions),
            extracted_styles=styles,
        )

    def _optimize(self, file_path: str, markup: str) -> str:
        if self._optimizer is None:
            return markup
        try:
            return self._optimizer.optimize(markup, self._optimizer_config)
        except OptimizationError as exc:
            raise SymbolCompileError(f"Optimizer failed: {exc}") from exc

    def _lift_definitions(self, svg: ET.Element) -> list[str]:
        """Detach every outermost ``<defs>`` block and serialize its children."""
        definitions: list[str] = []
        for parent, defs in list(_outermost(svg, "defs")):
            definitions.extend(serialize(child) for child in defs)
            parent.remove(defs)
        return definitions

    def _extract_styles(self, svg: ET.Element) -> str | None:
        """Detach every ``<style>`` block and return its joined text."""
        blocks: list[str] = []
        for parent, style in list(_outermost(svg, "style")):
            text = "".join(style.itertext()).strip()
            if text:
                blocks.append(text)
            parent.remove(style)
        return "\n".join(blocks) if blocks else None


def _outermost(element: ET.Element, tag: str) -> Iterator[tuple[ET.Element, ET.Element]]:
    """Yield ``(parent, child)`` pairs for descendants named ``tag``, not nested in one."""
    for child in element:
        if child.tag == tag:
            yield element, child
        else:
            yield from _outermost(child, tag)
