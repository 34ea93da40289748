import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from .errors import SourceIOError

logger = logging.getLogger(__name__)


class SnippetLibrary(Mapping):
    """
    Named blocks of lines that `++name` embeds.

    Built once before any file compiles and never modified afterwards, so
    every compile thread can read it without locking.
    """

    def __init__(self, snippets: Optional[Mapping[str, List[str]]] = None):
        frozen = {name: tuple(lines) for name, lines in (snippets or {}).items()}
        self._snippets = MappingProxyType(frozen)

    @classmethod
    def from_directory(cls, root) -> 'SnippetLibrary':
        """Keys every file under `root` by its relative path without extension."""
        root = Path(root)
        snippets: Dict[str, List[str]] = {}
        if not root.is_dir():
            logger.debug("No snippet directory at %s", root)
            return cls(snippets)
        for path in sorted(root.rglob('*')):
            if not path.is_file():
                continue
            try:
                text = path.read_text(encoding='utf-8')
            except UnicodeError:
                logger.warning("Skipping snippet %s: not UTF-8 text", path)
                continue
            except OSError as e:
                raise SourceIOError(f"Cannot read snippet '{path}': {e}", path=str(path)) from e
            name = path.relative_to(root).with_suffix('').as_posix()
            snippets[name] = text.splitlines()
        logger.debug("Loaded %d snippets from %s", len(snippets), root)
        return cls(snippets)

    def __getitem__(self, name):
        return self._snippets[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._snippets)

    def __len__(self) -> int:
        return len(self._snippets)
