#================================================================
# Settings file watcher
#================================================================
import logging
import queue
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from lightcast.settings.lightSettings import Settings, SettingsError

logger = logging.getLogger(__name__)


class SettingsFileHandler(FileSystemEventHandler):
    """Reloads one settings file whenever it changes on disk.

    Runs on the watchdog observer thread; results only leave through
    ``updates`` so the frame loop stays the sole owner of the scene.
    """

    def __init__(self, path, loader: Callable[[Path], Settings], updates: queue.Queue):
        super().__init__()
        self.path = Path(path).resolve()
        self.loader = loader
        self.updates = updates

    def on_modified(self, event):
        self._check(event.src_path)

    def on_created(self, event):
        self._check(event.src_path)

    def on_moved(self, event):
        self._check(event.dest_path)

    def _check(self, path):
        if Path(path).resolve() == self.path:
            self.reload()

    def reload(self):
        logger.info("%s changed, reloading", self.path)
        try:
            settings = self.loader(self.path)
        except SettingsError as e:
            logger.error("Ignoring settings change: %s", e)
            return
        self.updates.put(settings)


class SettingsWatcher:
    def __init__(self, path, loader: Callable[[Path], Settings]):
        self.updates: queue.Queue = queue.Queue()
        self.handler = SettingsFileHandler(path, loader, self.updates)
        self.observer = Observer()
        self.observer.schedule(self.handler, path=str(self.handler.path.parent), recursive=False)

    def start(self):
        self.observer.start()
        logger.info("Watching %s for changes", self.handler.path)

    def stop(self):
        self.observer.stop()
        self.observer.join()

    def latest(self) -> Optional[Settings]:
        """Most recent reloaded settings since the last call, or None."""
        latest = None
        while True:
            try:
                latest = self.updates.get_nowait()
            except queue.Empty:
                return latest

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc):
        self.stop()
