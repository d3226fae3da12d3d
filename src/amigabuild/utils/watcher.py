import time
from pathlib import Path
from typing import Callable, Dict, Optional
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
from .lang import is_assembly_source


class SourceSaveHandler(FileSystemEventHandler):
    """
    Listens for saved assembly sources under a workspace and triggers a callback.
    """
    def __init__(self, callback: Callable[[str], None], ignore_dir: Optional[str] = None):
        self.callback = callback
        self.ignore_dir = Path(ignore_dir).resolve() if ignore_dir else None
        self.last_triggered: Dict[str, float] = {}
        self.debounce_seconds = 0.5 # Prevent double-triggers from some editors

    def on_modified(self, event):
        self._handle(event)

    def on_created(self, event):
        self._handle(event)

    def _handle(self, event):
        if event.is_directory:
            return

        path = Path(event.src_path).resolve()
        if not is_assembly_source(str(path)):
            return
        if self.ignore_dir and self.ignore_dir in path.parents:
            return

        key = str(path)
        now = time.time()
        if now - self.last_triggered.get(key, 0) > self.debounce_seconds:
            self.last_triggered[key] = now
            self.callback(key)


class FileWatcher:
    """
    Manages the watchdog observer thread.
    """
    def __init__(self):
        self.observer = Observer()
        self.watch = None

    def start_watching(self, directory: str, callback: Callable[[str], None], ignore_dir: Optional[str] = None):
        """
        Starts a background thread watching the workspace directory recursively.
        """
        path = Path(directory).resolve()
        if not path.is_dir():
            raise FileNotFoundError(f"Cannot watch non-existent directory: {directory}")

        handler = SourceSaveHandler(callback, ignore_dir)
        self.watch = self.observer.schedule(handler, str(path), recursive=True)
        self.observer.start()

    def stop_watching(self):
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
