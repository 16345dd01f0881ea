# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Configuration structure for sprite generation."""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePath
from typing import Any, Literal

logger = logging.getLogger(__name__)

InjectPosition = Literal["first", "last"]

DEFAULT_FILE_NAME: str = "sprite.svg"
DEFAULT_TYPE_FILE_NAME: str = "types.ts"
DEFAULT_DOM_ID: str = "__svg__icons__dom__"
NAME_PLACEHOLDER: str = "[name]"
DEFAULT_DYNAMIC_TAGS: tuple[str, ...] = (
    "linearGradient",
    "radialGradient",
    "filter",
    "clipPath",
)


class ConfigurationError(ValueError):
    """Represent an invalid or unresolvable configuration."""


@dataclass(frozen=True)
class SpriteConfig:
    """Describe one sprite generation setup.

    Attributes:
        input_dir: Directory scanned for icon files.
        output_dir: Directory receiving the sprite and type manifest.
        cwd: Base directory for relative paths; process cwd when ``None``.
        file_name: Sprite file name.
        type_file_name: Type manifest file name.
        grouped: Emit one sprite per immediate parent directory.
        with_types: Emit a type manifest next to each sprite.
        inject: Position of the injected container in the document body.
        dom_id: Element id of the injected container.
        optimize: Run the optimizer before compiling each file.
        optimizer_config: Opaque options handed to the optimizer.
        symbol_id: Naming template containing ``[name]``; camel case when ``None``.
        dynamic_tags: Element names that mark a symbol as dynamic.
        debounce_seconds: Quiet window that collapses bursts of change events.
        compile_timeout: Per-file compile wait bound in seconds.
        max_workers: Worker threads used for per-file compilation.
    """

    input_dir: Path
    output_dir: Path
    cwd: Path | None = None
    file_name: str = DEFAULT_FILE_NAME
    type_file_name: str = DEFAULT_TYPE_FILE_NAME
    grouped: bool = False
    with_types: bool = True
    inject: InjectPosition = "last"
    dom_id: str = DEFAULT_DOM_ID
    optimize: bool = False
    optimizer_config: dict[str, Any] = field(default_factory=dict)
    symbol_id: str | None = None
    dynamic_tags: tuple[str, ...] = DEFAULT_DYNAMIC_TAGS
    debounce_seconds: float = 0.2
    compile_timeout: float = 30.0
    max_workers: int = 4

    def resolve(self) -> "SpriteConfig":
        """Validate the configuration and resolve directories to absolute paths.

        Returns:
            A new configuration with absolute ``cwd``, ``input_dir`` and ``output_dir``.

        Raises:
            ConfigurationError: If any field is invalid.
        """
        base_dir = Path(self.cwd) if self.cwd is not None else Path(os.getcwd())
        input_dir = (base_dir / self.input_dir).resolve()
        output_dir = (base_dir / self.output_dir).resolve()

        if self.inject not in ("first", "last"):
            raise ConfigurationError(
                f"inject must be 'first' or 'last', got '{self.inject}'."
            )
        if not self.dom_id.strip():
            raise ConfigurationError("dom_id must not be empty.")
        if self.symbol_id is not None and NAME_PLACEHOLDER not in self.symbol_id:
            raise ConfigurationError(
                f"symbol_id template must contain '{NAME_PLACEHOLDER}', got '{self.symbol_id}'."
            )
        for label, name in (
            ("file_name", self.file_name),
            ("type_file_name", self.type_file_name),
        ):
            if not name or PurePath(name).name != name:
                raise ConfigurationError(
                    f"{label} must be a plain file name, got '{name}'."
                )
        if self.debounce_seconds < 0:
            raise ConfigurationError("debounce_seconds must be >= 0.")
        if self.compile_timeout <= 0:
            raise ConfigurationError("compile_timeout must be > 0.")
        if self.max_workers <= 0:
            raise ConfigurationError("max_workers must be > 0.")
        if output_dir.exists() and not output_dir.is_dir():
            raise ConfigurationError(
                f"Output directory is not a directory: {output_dir}"
            )

        logger.debug(
            f"Configuration resolved (input_dir={input_dir} output_dir={output_dir} "
            f"grouped={self.grouped} optimize={self.optimize})"
        )
        return replace(
            self,
            cwd=base_dir.resolve(),
            input_dir=input_dir,
            output_dir=output_dir,
            dynamic_tags=tuple(self.dynamic_tags),
        )

    @property
    def sprite_path(self) -> Path:
        return self.output_dir / self.file_name

    @property
    def types_path(self) -> Path:
        return self.output_dir / self.type_file_name


def should_apply(mode: str) -> bool:
    """Return whether the plugin activates for a host build mode."""
    return mode == "development"
