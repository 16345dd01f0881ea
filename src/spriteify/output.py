# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Change-detecting artifact writes."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class ArtifactWriteError(RuntimeError):
    """Represent a fatal artifact write or delete failure."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Failed to write {path}: {message}")
        self.path = path


def write_if_changed(path: Path, content: str) -> bool:
    """Write ``content`` to ``path`` unless the file already holds it.

    Args:
        path: Target file path.
        content: Serialized artifact.

    Returns:
        ``True`` when the file was written, ``False`` when it was unchanged.

    Raises:
        ArtifactWriteError: If the directory cannot be created or the file
            cannot be read or written.
    """
    try:
        current = path.read_text(encoding="utf-8") if path.is_file() else None
    except (OSError, UnicodeDecodeError) as exc:
        raise ArtifactWriteError(path, str(exc)) from exc
    if current == content:
        logger.debug(f"Artifact unchanged (path={path})")
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the byte comparison above stable on every platform
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise ArtifactWriteError(path, str(exc)) from exc
    logger.info(f"Artifact written (path={path})")
    return True


def remove_if_exists(path: Path) -> bool:
    """Delete ``path`` if present.

    Returns:
        ``True`` when a file was deleted.

    Raises:
        ArtifactWriteError: If an existing file cannot be removed.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise ArtifactWriteError(path, str(exc)) from exc
    logger.info(f"Artifact deleted (path={path})")
    return True
