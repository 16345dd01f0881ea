# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from pathlib import Path

from watchdog.events import (
    DirDeletedEvent,
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from spriteify.watcher import IconChangeHandler


class _RecordingOrchestrator:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def watch_change(self, path: str | Path, kind: str) -> bool:
        self.calls.append((str(path), kind))
        return True


def test_wat_001_handler_maps_watchdog_events_to_change_kinds() -> None:
    orchestrator = _RecordingOrchestrator()
    handler = IconChangeHandler(orchestrator)  # type: ignore[arg-type]

    handler.dispatch(FileCreatedEvent("/icons/a.svg"))
    handler.dispatch(FileModifiedEvent("/icons/a.svg"))
    handler.dispatch(DirModifiedEvent("/icons"))
    handler.dispatch(FileDeletedEvent("/icons/b.svg"))
    handler.dispatch(DirDeletedEvent("/icons/nav"))

    assert orchestrator.calls == [
        ("/icons/a.svg", "created"),
        ("/icons/a.svg", "updated"),
        ("/icons/b.svg", "deleted"),
        ("/icons/nav", "deleted"),
    ]


def test_wat_002_move_is_a_delete_followed_by_a_create() -> None:
    orchestrator = _RecordingOrchestrator()
    handler = IconChangeHandler(orchestrator)  # type: ignore[arg-type]

    handler.dispatch(FileMovedEvent("/icons/old.svg", "/icons/new.svg"))

    assert orchestrator.calls == [
        ("/icons/old.svg", "deleted"),
        ("/icons/new.svg", "created"),
    ]
