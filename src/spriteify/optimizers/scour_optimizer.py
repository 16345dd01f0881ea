# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Optimizer implementation backed by Scour."""

import logging
from types import SimpleNamespace
from typing import Any, Mapping
from xml.parsers.expat import ExpatError

from scour import scour

from spriteify.optimizer import OptimizationError

logger = logging.getLogger(__name__)

SCOUR_DEFAULT_OPTIONS: dict[str, Any] = {
    "enable_viewboxing": True,
    "strip_comments": True,
    "strip_xml_prolog": True,
    "remove_metadata": True,
    "remove_descriptive_elements": True,
    "indent_type": "none",
    "newlines": False,
    "quiet": True,
}


class ScourOptimizer:
    """Optimize SVG markup with Scour."""

    def __init__(self, defaults: Mapping[str, Any] | None = None) -> None:
        """Initialize optimizer defaults.

        Args:
            defaults: Base options merged under each call's configuration.
        """
        self._defaults = dict(SCOUR_DEFAULT_OPTIONS if defaults is None else defaults)

    def optimize(self, markup: str, config: Mapping[str, Any]) -> str:
        """Optimize markup with Scour.

        Args:
            markup: Raw SVG markup.
            config: Scour option overrides, keyed by Scour option name.

        Returns:
            Optimized markup.

        Raises:
            OptimizationError: If Scour rejects the input or returns nothing.
        """
        options = scour.sanitizeOptions(
            SimpleNamespace(**{**self._defaults, **dict(config)})
        )
        try:
            optimized = scour.scourString(markup, options)
        except (ExpatError, ValueError, TypeError, AttributeError) as exc:
            logger.warning(f"Scour optimization failed (error={exc})")
            raise OptimizationError(str(exc)) from exc
        if not optimized or not optimized.strip():
            raise OptimizationError("Optimizer did not return data.")
        return optimized
