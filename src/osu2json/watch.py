from __future__ import annotations
import os
import time
from typing import Callable, Optional
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

class BeatmapFileWatcher(FileSystemEventHandler):
    def __init__(self, path: str, on_change: Callable[[], None], debounce: float = 0.3):
        super().__init__()
        self.path = os.path.abspath(path)
        self.on_change = on_change
        self.debounce = float(debounce)
        self._last_sig = float("-inf")

    def _maybe_signal(self, candidate_path) -> bool:
        # editors often save via rename, so dest_path counts too
        if not candidate_path:
            return False
        if isinstance(candidate_path, bytes):
            candidate_path = os.fsdecode(candidate_path)
        if os.path.abspath(candidate_path) != self.path:
            return False
        now = time.monotonic()
        if now - self._last_sig <= self.debounce:
            return False
        self._last_sig = now
        self.on_change()
        return True

    def on_modified(self, event):
        if not event.is_directory:
            self._maybe_signal(event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self._maybe_signal(event.src_path)

    def on_moved(self, event):
        if not event.is_directory:
            self._maybe_signal(getattr(event, "dest_path", None))

def watch_file(path: str, on_change: Callable[[], None], debounce: float = 0.3,
               stop_after: Optional[float] = None):
    """
    Blocks and calls on_change() whenever `path` changes.
    Returns on KeyboardInterrupt (or after stop_after seconds).
    """
    target = os.path.abspath(path)
    observer = Observer()
    observer.schedule(BeatmapFileWatcher(target, on_change, debounce), os.path.dirname(target), recursive=False)
    observer.start()
    started = time.monotonic()
    try:
        while observer.is_alive():
            if stop_after is not None and time.monotonic() - started >= stop_after:
                break
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()
