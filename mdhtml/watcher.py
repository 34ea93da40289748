import logging
from pathlib import Path
from typing import Iterable, Set

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config import SiteConfig
from .site import build_site

logger = logging.getLogger(__name__)

REBUILD_EVENTS = ('created', 'modified', 'deleted', 'moved')


def trigger_rebuild(config: SiteConfig):
    result = build_site(config)
    for error in result.errors:
        logger.error("%s", error)
    return result


def _is_within(path: Path, directory: Path) -> bool:
    try:
        path.relative_to(directory)
    except ValueError:
        return False
    return True


class ChangeHandler(FileSystemEventHandler):
    def __init__(self, config: SiteConfig, watch_files: Iterable[Path] = ()):
        self.config = config
        self.output_dir = config.output.resolve()
        self.watch_dirs = [config.content.resolve(), config.embed.resolve()]
        self.watch_files: Set[Path] = {p.resolve() for p in watch_files}
        logger.info("Handler initialized. Monitoring for changes...")

    def is_relevant(self, src_path) -> bool:
        path = Path(src_path).resolve()
        if _is_within(path, self.output_dir):
            return False
        return path in self.watch_files or any(_is_within(path, d) for d in self.watch_dirs)

    def on_any_event(self, event):
        if event.event_type not in REBUILD_EVENTS:
            return
        # a directory's mtime changes with every file written inside it
        if event.is_directory and event.event_type == 'modified':
            return
        paths = [event.src_path]
        if getattr(event, 'dest_path', ''):
            paths.append(event.dest_path)
        if any(self.is_relevant(p) for p in paths):
            logger.info("Detected %s in: %s", event.event_type, event.src_path)
            self.rebuild()

    def rebuild(self):
        trigger_rebuild(self.config)


def watch_paths_for(config: SiteConfig) -> Set[Path]:
    return {path for pattern in config.watch for path in config.base_dir.glob(pattern)}


def run_watcher(config: SiteConfig):
    """Sets up and runs the watchdog observer."""
    watch_files = watch_paths_for(config)
    event_handler = ChangeHandler(config, watch_files)
    observer = Observer()

    observer.schedule(event_handler, str(config.content), recursive=True)
    observer.schedule(event_handler, str(config.embed), recursive=True)
    for dir_path in {p.parent for p in watch_files}:
        if not dir_path.is_dir():
            logger.warning("Directory '%s' does not exist. Cannot watch.", dir_path)
            continue
        observer.schedule(event_handler, str(dir_path), recursive=False)
        logger.info("Scheduled watcher for directory: %s", dir_path)

    observer.start()
    logger.info("Watching %s and %s for changes. Press Ctrl+C to stop.", config.content, config.embed)

    try:
        while observer.is_alive():
            observer.join(timeout=1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher (Ctrl+C pressed)...")
    finally:
        if observer.is_alive():
            observer.stop()
        observer.join()
        logger.info("Watcher stopped completely.")
