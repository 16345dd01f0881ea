# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Identifier derivation for compiled symbols."""

import re
from pathlib import PurePosixPath

from spriteify.config import NAME_PLACEHOLDER

_WORD_DELIMITERS = re.compile(r"[-_]")
_TITLE_WORDS = re.compile(r"[^0-9A-Za-z]+")


def to_camel_case(name: str) -> str:
    """Join hyphen/underscore-delimited words in camel case.

    Args:
        name: File base name without extension.

    Returns:
        Identifier with every word after the first capitalized and the
        first character lowercased.
    """
    words = _WORD_DELIMITERS.split(name)
    joined = words[0] + "".join(word[:1].upper() + word[1:] for word in words[1:])
    return joined[:1].lower() + joined[1:]


def to_title_case(name: str) -> str:
    """Title-case every word of ``name`` and join them without separators."""
    words = [word for word in _TITLE_WORDS.split(name) if word]
    return "".join(word[:1].upper() + word[1:].lower() for word in words)


def derive_identifier(relative_path: str, template: str | None = None) -> str:
    """Derive a symbol identifier from an icon file path.

    Args:
        relative_path: Icon path relative to the scanned root.
        template: Optional naming template; ``[name]`` is replaced by the
            file base name verbatim.

    Returns:
        Symbol identifier.
    """
    base_name = PurePosixPath(relative_path).stem
    if template is not None:
        return template.replace(NAME_PLACEHOLDER, base_name)
    return to_camel_case(base_name)
