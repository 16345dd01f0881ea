# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Icon source discovery."""

import logging
from pathlib import Path

from spriteify.model import IconSource

logger = logging.getLogger(__name__)

ICON_EXTENSION: str = ".svg"


def scan_icons(root_dir: Path) -> list[IconSource]:
    """List icon files beneath a root directory.

    Args:
        root_dir: Directory to scan recursively.

    Returns:
        Icon sources sorted by relative path; empty when the directory is
        missing or holds no icons.
    """
    if not root_dir.is_dir():
        logger.warning(f"Icon directory does not exist (path={root_dir})")
        return []
    sources = [
        IconSource(root_dir=root_dir, relative_path=path.relative_to(root_dir).as_posix())
        for path in root_dir.rglob(f"*{ICON_EXTENSION}")
        if path.is_file()
    ]
    return sorted(sources, key=lambda source: source.relative_path)
