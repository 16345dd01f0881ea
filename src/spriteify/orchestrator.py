# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Full and incremental sprite builds driven by file-change notifications."""

import concurrent.futures
import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

from spriteify.assembler import IdentifierCollisionError, SpriteAssembler, SpriteDocument
from spriteify.cache import CompilationCache
from spriteify.compiler import SymbolCompileError, SymbolCompiler
from spriteify.config import SpriteConfig
from spriteify.manifest import generate_manifest
from spriteify.model import CompiledSymbol, CompileError, IconSource
from spriteify.module_code import create_module_code
from spriteify.naming import derive_identifier
from spriteify.normalizer import content_digest
from spriteify.output import ArtifactWriteError, remove_if_exists, write_if_changed
from spriteify.scanner import ICON_EXTENSION, scan_icons

logger = logging.getLogger(__name__)

ChangeKind = Literal["created", "updated", "deleted"]
CHANGE_KINDS: frozenset[str] = frozenset({"created", "updated", "deleted"})


class OrchestratorState(str, Enum):
    """Pipeline phase of an orchestrator."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPILING = "compiling"
    ASSEMBLING = "assembling"
    SERVING = "serving"


@dataclass(frozen=True)
class ChangeEvent:
    """Represent one file-change notification."""

    path: Path
    kind: ChangeKind


@dataclass(frozen=True)
class BuildReport:
    """Summarize one build cycle.

    Attributes:
        source_count: Number of icon files scanned.
        compiled: Relative paths compiled in this cycle.
        reused: Relative paths served from the cache.
        errors: Recoverable per-file errors.
        written: Artifacts written because their content changed.
        unchanged: Artifacts already up to date.
        deleted: Artifacts removed because nothing produces them anymore.
        duplicates: Groups of symbols sharing a content hash.
    """

    source_count: int
    compiled: list[str] = field(default_factory=list)
    reused: list[str] = field(default_factory=list)
    errors: list[CompileError] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    deleted: list[Path] = field(default_factory=list)
    duplicates: list[list[CompiledSymbol]] = field(default_factory=list)


@dataclass
class _CompileOutcome:
    symbols: list[CompiledSymbol] = field(default_factory=list)
    errors: list[CompileError] = field(default_factory=list)
    compiled: list[str] = field(default_factory=list)
    reused: list[str] = field(default_factory=list)


_STOP = object()
_POLL_INTERVAL = 0.05


class IncrementalOrchestrator:
    """Coordinate builds, change-driven rebuilds and live module serving.

    One orchestrator owns one cache for its lifetime. Build cycles and
    serving requests run one at a time; file-change notifications are queued
    and consumed by a single debounced loop.
    """

    def __init__(
        self,
        config: SpriteConfig,
        cache: CompilationCache | None = None,
        compiler: SymbolCompiler | None = None,
        assembler: SpriteAssembler | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Sprite configuration; validated and resolved here.
            cache: Compilation cache owned by this orchestrator.
            compiler: Symbol compiler; a non-optimizing compiler when ``None``.
            assembler: Sprite assembler.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        self._config = config.resolve()
        self._cache = cache if cache is not None else CompilationCache()
        self._compiler = compiler or SymbolCompiler(dynamic_tags=self._config.dynamic_tags)
        self._assembler = assembler or SpriteAssembler()
        self._state = OrchestratorState.IDLE
        self._cycle_lock = threading.Lock()
        self._events: queue.Queue[object] = queue.Queue()
        self._artifacts: set[Path] = self._existing_artifacts()
        self._worker: threading.Thread | None = None
        self._stopped = threading.Event()

    @property
    def config(self) -> SpriteConfig:
        return self._config

    @property
    def cache(self) -> CompilationCache:
        return self._cache

    @property
    def state(self) -> OrchestratorState:
        return self._state

    def build(self) -> BuildReport:
        """Run one full scan, compile, assemble and write cycle.

        Returns:
            Cycle summary.

        Raises:
            IdentifierCollisionError: If two sources share an identifier; nothing is written.
            ArtifactWriteError: If an artifact cannot be written or deleted.
        """
        with self._cycle_lock:
            try:
                return self._build()
            finally:
                self._state = OrchestratorState.IDLE

    def watch_change(self, path: str | Path, kind: str) -> bool:
        """Queue a change notification when it concerns an icon source.

        Args:
            path: Changed file path.
            kind: One of ``created``, ``updated``, ``deleted``.

        Returns:
            ``True`` when the notification was queued.
        """
        resolved = Path(path).resolve()
        if kind not in CHANGE_KINDS:
            return False
        if not resolved.is_relative_to(self._config.input_dir):
            return False
        if resolved.suffix != ICON_EXTENSION and kind != "deleted":
            return False
        self.notify(ChangeEvent(path=resolved, kind=kind))  # type: ignore[arg-type]
        return True

    def notify(self, event: ChangeEvent) -> None:
        """Put a change event on the orchestrator queue."""
        logger.debug(f"Change queued (path={event.path} kind={event.kind})")
        self._events.put(event)

    def run_pending(self, timeout: float | None = None) -> BuildReport | None:
        """Consume one burst of change events and rebuild once.

        Waits for a first event, then keeps collecting until no new event
        arrives within the debounce window.

        Args:
            timeout: Seconds to wait for the first event; ``None`` blocks.

        Returns:
            Report of the rebuild, or ``None`` when no event arrived or the
            loop was stopped.
        """
        try:
            first = self._events.get(timeout=timeout)
        except queue.Empty:
            return None
        if first is _STOP:
            return None

        batch = [first]
        while True:
            try:
                event = self._events.get(timeout=self._config.debounce_seconds)
            except queue.Empty:
                break
            if event is _STOP:
                self._events.put(_STOP)
                break
            batch.append(event)

        for event in batch:
            if isinstance(event, ChangeEvent) and event.kind == "deleted":
                self._invalidate(event.path)
        logger.info(f"Rebuilding after file changes (events={len(batch)})")
        return self.build()

    def start(self) -> None:
        """Start the background loop consuming change events."""
        if self._worker is not None:
            return
        self._stopped.clear()
        self._worker = threading.Thread(
            target=self._consume, name="spriteify-orchestrator", daemon=True
        )
        self._worker.start()

    def stop(self, timeout: float | None = None) -> None:
        """Stop the background loop after its current cycle."""
        if self._worker is None:
            return
        self._stopped.set()
        self._events.put(_STOP)
        self._worker.join(timeout=timeout)
        self._worker = None

    def module_code(self) -> str:
        """Compile uncached icons and render the injection module.

        Never writes artifacts.

        Raises:
            IdentifierCollisionError: If two sources share an identifier.
        """
        with self._cycle_lock:
            self._state = OrchestratorState.SERVING
            try:
                sources = scan_icons(self._config.input_dir)
                uncached = [
                    source
                    for source in sources
                    if self._cache_key(source) not in self._cache
                ]
                outcome = self._compile_sources(uncached)
                failed = {error.file_path for error in outcome.errors}
                symbols = []
                for source in sources:
                    entry = self._cache.lookup(self._cache_key(source))
                    if entry is not None and source.relative_path not in failed:
                        symbols.append(entry.symbol)
                documents = self._assembler.assemble(
                    symbols,
                    grouped=self._config.grouped,
                    default_group=self._config.input_dir.name,
                )
                html = "".join(self._assembler.render_inner(document) for document in documents)
                return create_module_code(
                    html=html, dom_id=self._config.dom_id, inject=self._config.inject
                )
            finally:
                self._state = OrchestratorState.IDLE

    def _consume(self) -> None:
        while not self._stopped.is_set():
            try:
                self.run_pending()
            except (IdentifierCollisionError, ArtifactWriteError) as exc:
                logger.error(f"Rebuild failed (error={exc})")

    def _build(self) -> BuildReport:
        self._state = OrchestratorState.SCANNING
        sources = scan_icons(self._config.input_dir)
        if not sources:
            logger.warning(f"No icon files found (input_dir={self._config.input_dir})")
            stale = self._artifacts | self._existing_artifacts()
            deleted = [path for path in sorted(stale) if remove_if_exists(path)]
            self._artifacts.clear()
            return BuildReport(source_count=0, deleted=deleted)

        self._state = OrchestratorState.COMPILING
        outcome = self._compile_sources(sources)
        report = BuildReport(
            source_count=len(sources),
            compiled=outcome.compiled,
            reused=outcome.reused,
            errors=outcome.errors,
            duplicates=self._duplicates({source.relative_path for source in sources}),
        )
        if not outcome.symbols:
            logger.warning("No valid icon symbols were compiled; artifacts left untouched")
            return report

        self._state = OrchestratorState.ASSEMBLING
        documents = self._assembler.assemble(
            outcome.symbols,
            grouped=self._config.grouped,
            default_group=self._config.input_dir.name,
        )
        artifacts = self._render_artifacts(documents)
        for path, content in artifacts.items():
            if write_if_changed(path, content):
                report.written.append(path)
            else:
                report.unchanged.append(path)
        for path in sorted(self._artifacts - artifacts.keys()):
            if remove_if_exists(path):
                report.deleted.append(path)
        self._artifacts = set(artifacts)

        self._log_duplicates(report.duplicates)
        logger.info(
            f"Sprite build completed (sources={report.source_count} compiled={len(report.compiled)} "
            f"reused={len(report.reused)} errors={len(report.errors)} written={len(report.written)})"
        )
        return report

    def _compile_sources(self, sources: list[IconSource]) -> _CompileOutcome:
        """Compile sources concurrently and join results in scan order."""
        results: dict[str, tuple[CompiledSymbol, bool]] = {}
        failures: dict[str, str] = {}
        queued = list(sources)
        while queued:
            queued = self._compile_round(queued, results, failures)

        outcome = _CompileOutcome()
        for source in sources:
            if source.relative_path in failures:
                self._record_error(outcome, source, failures[source.relative_path])
                continue
            symbol, compiled = results[source.relative_path]
            outcome.symbols.append(symbol)
            if compiled:
                outcome.compiled.append(source.relative_path)
            else:
                outcome.reused.append(source.relative_path)
        return outcome

    def _compile_round(
        self,
        sources: list[IconSource],
        results: dict[str, tuple[CompiledSymbol, bool]],
        failures: dict[str, str],
    ) -> list[IconSource]:
        """Run one executor over ``sources`` and return those still to compile.

        Each task gets ``compile_timeout`` seconds from the moment it starts
        running. A stalled task keeps its worker thread, so once one is
        detected every task that has not started yet is handed back for a
        fresh executor.
        """
        timeout = self._config.compile_timeout
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=self._config.max_workers
        )
        pending = {executor.submit(self._compile_one, source): source for source in sources}
        started: dict[concurrent.futures.Future, float] = {}
        requeued: list[IconSource] = []
        try:
            while pending:
                done, _ = concurrent.futures.wait(
                    pending,
                    timeout=_POLL_INTERVAL,
                    return_when=concurrent.futures.FIRST_COMPLETED,
                )
                for future in done:
                    source = pending.pop(future)
                    try:
                        results[source.relative_path] = future.result()
                    except SymbolCompileError as exc:
                        failures[source.relative_path] = str(exc)

                now = time.monotonic()
                stalled = False
                for future, source in list(pending.items()):
                    if not future.running():
                        continue
                    if now - started.setdefault(future, now) < timeout:
                        continue
                    pending.pop(future)
                    failures[source.relative_path] = f"Compilation timed out after {timeout}s"
                    stalled = True
                if stalled:
                    for future, source in list(pending.items()):
                        if future.cancel():
                            pending.pop(future)
                            requeued.append(source)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        if requeued:
            logger.debug(f"Moving queued compilations to a fresh executor (count={len(requeued)})")
        return requeued

    def _compile_one(self, source: IconSource) -> tuple[CompiledSymbol, bool]:
        """Return the symbol for one source and whether it was freshly compiled."""
        try:
            raw_markup = source.absolute_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SymbolCompileError(f"Unreadable file: {exc}") from exc
        key = self._cache_key(source)
        source_hash = content_digest(raw_markup)
        entry = self._cache.lookup(key)
        if entry is not None and not self._cache.should_recompile(key, source_hash):
            logger.debug(f"Cache hit (file_path={source.relative_path})")
            return entry.symbol, False

        identifier = derive_identifier(source.relative_path, self._config.symbol_id)
        symbol = self._compiler.compile(source.relative_path, raw_markup, identifier)
        self._cache.store(key, source_hash, symbol)
        return symbol, True

    def _record_error(self, outcome: _CompileOutcome, source: IconSource, message: str) -> None:
        logger.warning(
            f"Skipping icon due to compile failure (file_path={source.relative_path} error={message})"
        )
        outcome.errors.append(CompileError(file_path=source.relative_path, message=message))

    def _render_artifacts(self, documents: list[SpriteDocument]) -> dict[Path, str]:
        artifacts: dict[Path, str] = {}
        for document in documents:
            target_dir = self._config.output_dir
            if document.group is not None:
                target_dir = target_dir / document.group
            artifacts[target_dir / self._config.file_name] = self._assembler.render(document)
            if self._config.with_types:
                artifacts[target_dir / self._config.type_file_name] = generate_manifest(
                    document.identifiers, namespace=document.group
                )
        return artifacts

    def _duplicates(self, current_paths: set[str]) -> list[list[CompiledSymbol]]:
        groups: list[list[CompiledSymbol]] = []
        for entries in self._cache.duplicates_by_hash():
            members = [
                entry.symbol for entry in entries if entry.symbol.file_path in current_paths
            ]
            if len(members) > 1:
                groups.append(members)
        return groups

    def _log_duplicates(self, groups: list[list[CompiledSymbol]]) -> None:
        for index, members in enumerate(groups, start=1):
            listing = ", ".join(
                f"{symbol.identifier}={symbol.file_path}" for symbol in members
            )
            logger.warning(
                f"Duplicate icons share identical content (group={index} members={listing})"
            )

    def _existing_artifacts(self) -> set[Path]:
        """Return artifacts already on disk at the paths this configuration writes.

        Grouped layouts are discovered one directory below ``output_dir`` so
        artifacts written by an earlier process are cleaned up as well.
        """
        names = [self._config.file_name]
        if self._config.with_types:
            names.append(self._config.type_file_name)
        output_dir = self._config.output_dir
        if self._config.grouped:
            candidates = [path for name in names for path in output_dir.glob(f"*/{name}")]
        else:
            candidates = [output_dir / name for name in names]
        return {path for path in candidates if path.is_file()}

    def _invalidate(self, path: Path) -> None:
        """Drop cache entries for a deleted file, or for every file under a deleted directory."""
        target = str(path)
        if self._cache.invalidate(target):
            return
        for entry in self._cache.entries():
            if Path(entry.source_path).is_relative_to(path):
                self._cache.invalidate(entry.source_path)

    def _cache_key(self, source: IconSource) -> str:
        return str(source.absolute_path)
