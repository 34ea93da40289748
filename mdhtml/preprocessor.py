"""
Template expansion for mdhtml sources.

Expansion runs in two passes over a file's lines:

1. `expand` executes the iteration directives

       for_each_folder=<path>
           ...
           for_each_md_in_current_folder
               ...
           ;;;
       ;;;

   re-emitting each body once per folder (or markdown file) with that
   entry's metadata substituted into `{{key}}` placeholders.

2. `resolve` walks the flat result, records `name=value` assignments,
   replaces `++name` lines with the named snippet and substitutes the
   assigned variables into everything else.

Every emitted `Line` keeps the number of the source line it came from.
"""
import logging
from collections import ChainMap
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, NamedTuple, Optional, Tuple, Union

from .errors import DirectiveError, SourceIOError
from .scope import SOURCE_EXTENSION, VariableScope, file_metadata, folder_metadata, substitute
from .snippets import SnippetLibrary

logger = logging.getLogger(__name__)

FOLDER_DIRECTIVE = 'for_each_folder'
MD_DIRECTIVE = 'for_each_md_in_current_folder'
END_DIRECTIVE = ';;;'
EMBED_PREFIX = '++'


class Line(NamedTuple):
    number: int
    text: str


@dataclass
class IterationBlock:
    kind: str
    line: int
    argument: Optional[str] = None
    body: List[Union[Line, 'IterationBlock']] = field(default_factory=list)


def split_source(source: str) -> List[Line]:
    return [Line(number, text) for number, text in enumerate(source.splitlines(), start=1)]


class TemplatePreprocessor:
    """Turns the raw lines of one source file into fully resolved lines."""

    def __init__(self, snippets: Optional[SnippetLibrary] = None, content_root='.',
                 base_dir='.', output_extension: str = 'html'):
        self.snippets = snippets if snippets is not None else SnippetLibrary()
        self.content_root = Path(content_root)
        self.base_dir = Path(base_dir)
        self.output_extension = output_extension

    def preprocess(self, source: str, scope: Optional[VariableScope] = None) -> List[Line]:
        return self.resolve(self.expand(split_source(source)), scope)

    # --- Pass 1: iteration directives ---

    def expand(self, lines: List[Line]) -> List[Line]:
        items, _ = self._collect(lines, 0, None)
        expanded: List[Line] = []
        self._expand(items, ChainMap(), None, expanded)
        return expanded

    def _directive(self, line: Line) -> Optional[IterationBlock]:
        stripped = line.text.strip()
        if stripped.startswith('>'):
            return None
        if stripped == MD_DIRECTIVE:
            return IterationBlock(MD_DIRECTIVE, line.number)
        if stripped.startswith(FOLDER_DIRECTIVE):
            rest = stripped[len(FOLDER_DIRECTIVE):]
            if rest and not rest.startswith('='):
                return None
            path = rest[1:].strip()
            if not path:
                raise DirectiveError(f"'{FOLDER_DIRECTIVE}' needs a folder path, as in '{FOLDER_DIRECTIVE}=<path>'.",
                                     line.number)
            return IterationBlock(FOLDER_DIRECTIVE, line.number, path)
        return None

    def _collect(self, lines: List[Line], index: int,
                 opener: Optional[IterationBlock]) -> Tuple[List[Union[Line, IterationBlock]], int]:
        """Groups lines into directive blocks, returning the items and the index after them."""
        items: List[Union[Line, IterationBlock]] = []
        while index < len(lines):
            line = lines[index]
            if line.text.strip() == END_DIRECTIVE:
                if opener is None:
                    raise DirectiveError(f"'{END_DIRECTIVE}' without an open iteration directive.", line.number)
                return items, index + 1
            block = self._directive(line)
            if block is None:
                items.append(line)
                index += 1
                continue
            block.body, index = self._collect(lines, index + 1, block)
            items.append(block)
        if opener is not None:
            raise DirectiveError(f"'{opener.kind}' is missing its '{END_DIRECTIVE}' terminator.", opener.line)
        return items, index

    def _expand(self, items, context: Mapping[str, str], folder: Optional[Path], out: List[Line]):
        for item in items:
            if isinstance(item, Line):
                out.append(Line(item.number, substitute(item.text, context)))
            elif item.kind == FOLDER_DIRECTIVE:
                for subfolder in self._list_folders(item):
                    metadata = self._metadata(item, folder_metadata, subfolder, self.content_root)
                    self._expand(item.body, ChainMap(metadata, context), subfolder, out)
            else:
                if folder is None:
                    raise DirectiveError(f"'{MD_DIRECTIVE}' is only valid inside a '{FOLDER_DIRECTIVE}' body.",
                                         item.line)
                for md_file in self._list_markdown(folder, item.line):
                    metadata = self._metadata(item, file_metadata, md_file, self.content_root,
                                              self.output_extension)
                    self._expand(item.body, ChainMap(metadata, context), folder, out)

    def _metadata(self, block: IterationBlock, reader, *args) -> Mapping[str, str]:
        try:
            return reader(*args)
        except SourceIOError as e:
            if e.line is None:
                e.line = block.line
            raise

    def _list_folders(self, block: IterationBlock) -> List[Path]:
        path = Path(block.argument)
        if not path.is_absolute():
            path = self.base_dir / path
        try:
            return sorted(entry for entry in path.iterdir() if entry.is_dir())
        except OSError as e:
            raise SourceIOError(f"Error reading dir '{block.argument}': {e}", block.line) from e

    def _list_markdown(self, folder: Path, line: int) -> List[Path]:
        try:
            return sorted(entry for entry in folder.iterdir()
                          if entry.is_file() and entry.suffix == '.' + SOURCE_EXTENSION)
        except OSError as e:
            raise SourceIOError(f"Error reading dir '{folder}': {e}", line) from e

    # --- Pass 2: assignments, embeds, variables ---

    def resolve(self, lines: List[Line], scope: Optional[VariableScope] = None) -> List[Line]:
        scope = scope if scope is not None else VariableScope()
        resolved: List[Line] = []
        for line in lines:
            content = line.text.lstrip()
            if not content.strip():
                continue
            indent = line.text[:len(line.text) - len(content)]
            is_tag = '>' in content

            if not indent and '=' in content and not is_tag:
                name, _, value = content.partition('=')
                scope.assign(name.strip(), value.strip())
            elif not is_tag and content.rstrip().startswith(EMBED_PREFIX):
                name = content.strip()[len(EMBED_PREFIX):].strip()
                snippet = self.snippets.get(name)
                if snippet is None:
                    logger.debug("Line %d: no snippet named '%s', skipping embed", line.number, name)
                    continue
                for snippet_line in snippet:
                    resolved.append(Line(line.number, indent + scope.substitute(snippet_line)))
            else:
                resolved.append(Line(line.number, indent + scope.substitute(content)))
        return resolved
