# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Markup optimizer abstractions."""

import logging
from typing import Any, Mapping, Protocol

logger = logging.getLogger(__name__)


class OptimizationError(RuntimeError):
    """Represent an optimizer failure for one file."""


class Optimizer(Protocol):
    """Define markup optimization behavior."""

    def optimize(self, markup: str, config: Mapping[str, Any]) -> str:
        """Optimize SVG markup.

        Args:
            markup: Raw SVG markup.
            config: Caller-supplied optimizer options.

        Returns:
            Optimized markup.

        Raises:
            OptimizationError: If optimization fails or returns no data.
        """
