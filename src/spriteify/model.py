# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for icon sources and compiled symbols."""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath


@dataclass(frozen=True)
class IconSource:
    """Represent one discovered icon file.

    Attributes:
        root_dir: Scanned root directory.
        relative_path: POSIX-style path relative to ``root_dir``.
    """

    root_dir: Path
    relative_path: str

    @property
    def absolute_path(self) -> Path:
        return self.root_dir / self.relative_path

    @property
    def stem(self) -> str:
        return PurePosixPath(self.relative_path).stem

    @property
    def group(self) -> str:
        return group_name(self.relative_path, default=self.root_dir.name)


@dataclass(frozen=True)
class CompiledSymbol:
    """Represent one compiled, embeddable symbol.

    Attributes:
        identifier: Symbol id, unique within one sprite.
        file_path: Source path relative to the scanned root.
        markup: Serialized ``<symbol>`` fragment.
        normalized_markup: Whitespace-free markup the content hash is computed from.
        content_hash: MD5 hash of ``normalized_markup``.
        is_dynamic: Whether the symbol uses context-dependent elements.
        extracted_defs: Serialized definition nodes lifted out of the symbol.
        extracted_styles: Raw style text removed from the symbol, if any.
    """

    identifier: str
    file_path: str
    markup: str
    normalized_markup: str
    content_hash: str
    is_dynamic: bool
    extracted_defs: tuple[str, ...] = ()
    extracted_styles: str | None = None


@dataclass(frozen=True)
class CompileError:
    """Represent a recoverable compile error for one file."""

    file_path: str
    message: str


def group_name(relative_path: str, default: str) -> str:
    """Return the immediate parent directory name of a relative icon path.

    Top-level files belong to ``default``.
    """
    parent = PurePosixPath(relative_path).parent
    return parent.name or default
