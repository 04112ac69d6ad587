"""Change watching that re-runs reconciliation with per-directory debouncing.

Directory changes are detected by polling: each watched directory is
snapshotted as ``name -> (mtime_ns, size)`` and any name that appears,
disappears or changes between polls becomes one notification. Notifications
restart that directory's debounce timer, so a burst of edits leads to a
single reconciliation once the directory has been quiet for the debounce
interval.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from .config import DEFAULT_DEBOUNCE_MS, DEFAULT_POLL_INTERVAL, BarrelsConfig
from .discovery import find_barrel_directories, find_configured_directories
from .kinds import GENERATED_FILE_NAMES
from .logging import get_logger
from .models import BarrelDirectory, BarrelResult
from .reconciler import Reconciler

logger = get_logger("watch")

UpdateCallback = Callable[[BarrelResult], None]

_Snapshot = Dict[str, Tuple[int, int]]


def snapshot_directory(directory: Path) -> _Snapshot:
    """Return ``name -> (mtime_ns, size)`` for the direct children of ``directory``."""
    snapshot: _Snapshot = {}
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    st = entry.stat(follow_symlinks=False)
                except OSError:
                    snapshot[entry.name] = (0, 0)
                    continue
                snapshot[entry.name] = (st.st_mtime_ns, st.st_size)
    except OSError:
        return {}
    return snapshot


def changed_names(before: _Snapshot, after: _Snapshot) -> List[str]:
    """Names added, removed or modified between two snapshots, sorted."""
    names = set(before) ^ set(after)
    names.update(name for name in set(before) & set(after) if before[name] != after[name])
    return sorted(names)


class BarrelWatcher:
    """Keeps discovered barrels up to date until closed.

    Directories created after ``start()`` are not picked up.
    """

    def __init__(
        self,
        base_dir: Union[str, Path],
        *,
        on_update: Optional[UpdateCallback] = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        reconciler: Optional[Reconciler] = None,
        config: Optional[BarrelsConfig] = None,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.on_update = on_update
        self.debounce_seconds = max(debounce_ms, 0) / 1000.0
        self.poll_interval = poll_interval
        self.reconciler = reconciler or Reconciler()
        self.config = config
        self.directories: List[BarrelDirectory] = []

        self._lock = threading.Lock()
        self._reconcile_lock = threading.RLock()
        self._timers: Dict[Path, threading.Timer] = {}
        self._snapshots: Dict[Path, _Snapshot] = {}
        self._stop = threading.Event()
        self._closed = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "BarrelWatcher":
        """Discover barrels, reconcile each once, then begin polling for changes."""
        if self.config is not None:
            self.directories = find_configured_directories(
                self.base_dir, self.config, self.reconciler.parser
            )
        else:
            self.directories = find_barrel_directories(
                self.base_dir, parser=self.reconciler.parser
            )

        for found in self.directories:
            self._run(found)
            self._snapshots[found.dir] = snapshot_directory(found.dir)

        self._thread = threading.Thread(
            target=self._poll_loop, name="barrels-watch", daemon=True
        )
        self._thread.start()
        return self

    def notify(self, directory: BarrelDirectory, name: str) -> None:
        """Handle one change notification for ``name`` inside ``directory``."""
        if name in GENERATED_FILE_NAMES:
            return
        if os.path.splitext(name)[1] not in directory.kind.source_extensions:
            return
        self._schedule(directory)

    def pending(self) -> int:
        """Number of directories with a debounce timer waiting to fire."""
        with self._lock:
            return len(self._timers)

    def close(self) -> None:
        """Stop polling and cancel pending timers; idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            timers = list(self._timers.values())
            self._timers.clear()
        self._stop.set()
        for timer in timers:
            timer.cancel()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        # Wait out a reconciliation already in progress so no callback follows close().
        with self._reconcile_lock:
            pass

    def __enter__(self) -> "BarrelWatcher":
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _poll_loop(self) -> None:
        while not self._stop.wait(self.poll_interval):
            for found in self.directories:
                before = self._snapshots.get(found.dir, {})
                after = snapshot_directory(found.dir)
                self._snapshots[found.dir] = after
                for name in changed_names(before, after):
                    self.notify(found, name)

    def _schedule(self, directory: BarrelDirectory) -> None:
        with self._lock:
            if self._closed:
                return
            previous = self._timers.get(directory.dir)
            if previous is not None:
                previous.cancel()
            timer = threading.Timer(self.debounce_seconds, self._fire, args=(directory,))
            timer.daemon = True
            self._timers[directory.dir] = timer
            timer.start()

    def _fire(self, directory: BarrelDirectory) -> None:
        with self._reconcile_lock:
            with self._lock:
                if self._closed:
                    return
                timer = self._timers.get(directory.dir)
            self._run(directory, skip_empty=True)
            with self._lock:
                if self._timers.get(directory.dir) is timer:
                    self._timers.pop(directory.dir, None)

    def _run(self, directory: BarrelDirectory, *, skip_empty: bool = False) -> None:
        with self._reconcile_lock:
            try:
                result = self.reconciler.reconcile(
                    directory.dir, directory.kind, skip_empty=skip_empty
                )
            except (OSError, ValueError) as exc:
                logger.error("Failed to update %s: %s", directory.output_path, exc)
                return
            with self._lock:
                if self._closed:
                    return
            if result.written and self.on_update is not None:
                self.on_update(result)


def watch_barrels(
    base_dir: Union[str, Path],
    *,
    on_update: Optional[UpdateCallback] = None,
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    config: Optional[BarrelsConfig] = None,
) -> BarrelWatcher:
    """Start watching ``base_dir``; call ``close()`` on the result to stop."""
    if config is not None:
        debounce_ms = config.watch.debounce_ms
        poll_interval = config.watch.poll_interval
    watcher = BarrelWatcher(
        base_dir,
        on_update=on_update,
        debounce_ms=debounce_ms,
        poll_interval=poll_interval,
        config=config,
    )
    return watcher.start()


__all__ = [
    "BarrelWatcher",
    "changed_names",
    "snapshot_directory",
    "watch_barrels",
]
