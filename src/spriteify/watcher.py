# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Filesystem watcher feeding change events to an orchestrator."""

import logging

from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
    FileSystemMovedEvent,
)
from watchdog.observers import Observer

from spriteify.orchestrator import IncrementalOrchestrator

logger = logging.getLogger(__name__)


class IconChangeHandler(FileSystemEventHandler):
    """Translate watchdog events into orchestrator change notifications."""

    def __init__(self, orchestrator: IncrementalOrchestrator) -> None:
        super().__init__()
        self._orchestrator = orchestrator

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._orchestrator.watch_change(_path(event.src_path), "created")

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._orchestrator.watch_change(_path(event.src_path), "updated")

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._orchestrator.watch_change(_path(event.src_path), "deleted")

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        self._orchestrator.watch_change(_path(event.src_path), "deleted")
        if not event.is_directory:
            self._orchestrator.watch_change(_path(event.dest_path), "created")


class IconWatcher:
    """Watch the input directory and drive the orchestrator's change loop."""

    def __init__(self, orchestrator: IncrementalOrchestrator) -> None:
        self._orchestrator = orchestrator
        self._observer = Observer()

    def start(self) -> None:
        """Start the observer and the orchestrator's consumer loop.

        The input directory is created when missing so it can be watched.
        """
        input_dir = self._orchestrator.config.input_dir
        input_dir.mkdir(parents=True, exist_ok=True)
        self._observer.schedule(
            IconChangeHandler(self._orchestrator), str(input_dir), recursive=True
        )
        self._orchestrator.start()
        self._observer.start()
        logger.info(f"Watching icon directory (path={input_dir})")

    def stop(self) -> None:
        self._observer.stop()
        self._observer.join()
        self._orchestrator.stop()
        logger.info("Stopped watching icon directory")


def _path(raw: str | bytes) -> str:
    return raw.decode("utf-8") if isinstance(raw, bytes) else raw
