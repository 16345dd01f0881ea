# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Optimizer implementations for spriteify."""

from spriteify.optimizers.scour_optimizer import ScourOptimizer

__all__ = ["ScourOptimizer"]
