# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Construction of configured pipeline components."""

from spriteify.cache import CompilationCache
from spriteify.compiler import SymbolCompiler
from spriteify.config import SpriteConfig
from spriteify.optimizers import ScourOptimizer
from spriteify.orchestrator import IncrementalOrchestrator


def build_compiler(config: SpriteConfig) -> SymbolCompiler:
    """Create the symbol compiler for a configuration.

    Args:
        config: Sprite configuration.

    Returns:
        Compiler with a Scour optimizer when ``config.optimize`` is set.
    """
    optimizer = ScourOptimizer() if config.optimize else None
    return SymbolCompiler(
        optimizer=optimizer,
        optimizer_config=config.optimizer_config,
        dynamic_tags=config.dynamic_tags,
    )


def create_orchestrator(
    config: SpriteConfig, cache: CompilationCache | None = None
) -> IncrementalOrchestrator:
    """Create an orchestrator owning a fresh cache unless one is given.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    resolved = config.resolve()
    return IncrementalOrchestrator(
        config=resolved,
        cache=cache if cache is not None else CompilationCache(),
        compiler=build_compiler(resolved),
    )
