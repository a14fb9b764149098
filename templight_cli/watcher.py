import logging
import os
import threading
import time

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from templight.config import CONFIG_FILENAME, load_config
from templight.exceptions import TemplightError

logger = logging.getLogger(__name__)


class DebouncedBuildHandler(FileSystemEventHandler):
    """Collects file events and fires ``callback`` once things settle down."""

    def __init__(self, callback, config, root, debounce_interval=0.1):
        self.callback = callback
        self.root = root
        self.config = config
        self.debounce_interval = debounce_interval
        self.timer = None
        self.config_changed = False
        self._lock = threading.Lock()
        # held for the whole callback so builds never overlap
        self._build_lock = threading.Lock()

    def _trigger_build(self):
        with self._lock:
            if self.timer:
                self.timer.cancel()
            self.timer = threading.Timer(self.debounce_interval, self._execute_build)
            self.timer.daemon = True
            self.timer.start()

    def _execute_build(self):
        with self._build_lock:
            with self._lock:
                config_changed = self.config_changed
                self.config_changed = False
            self.callback(config_changed)

    def is_relevant(self, path):
        parts = os.path.relpath(path, self.root).split(os.sep)
        if any(part in self.config.ignore_dirs for part in parts):
            return False
        if parts[0] == ".." or any(part.startswith('.') for part in parts[:-1]):
            return False
        if os.path.basename(path) == CONFIG_FILENAME:
            return True
        return os.path.splitext(path)[1] in self.config.watch_extensions

    def on_any_event(self, event):
        if event.is_directory:
            return
        path = event.src_path
        if not self.is_relevant(path):
            return
        if os.path.basename(path) == CONFIG_FILENAME:
            with self._lock:
                self.config_changed = True
        print(f"File changed: {path}")
        self._trigger_build()


def watch_project(builder, poll_interval=1.0):
    """Rebuild on every relevant change below the builder's source dir.

    A change to ``templight.toml`` reloads the configuration and installs a
    freshly composed grammar before rebuilding.
    """
    watch_dir = str(builder.src_dir)

    def run_build(config_changed):
        try:
            if config_changed:
                print("Configuration changed, reloading grammar...")
                config = load_config(watch_dir)
                handler.config = config
                builder.reload(config)
            else:
                builder.build()
            print("Build finished. Watching...")
        except TemplightError as e:
            print(f"\033[91mBuild failed: {e}\033[0m")
        except OSError as e:
            logger.exception("Build failed")
            print(f"\033[91mBuild failed: {e}\033[0m")

    handler = DebouncedBuildHandler(run_build, builder.config, watch_dir)
    observer = Observer()
    observer.schedule(handler, watch_dir, recursive=True)
    observer.start()
    print(f"Watching {watch_dir} for changes...")
    try:
        while True:
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        print("\nStopping watcher.")
    finally:
        observer.stop()
        observer.join()
