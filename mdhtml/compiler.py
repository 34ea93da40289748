import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional

from .errors import CompileError, SourceIOError
from .preprocessor import Line, TemplatePreprocessor
from .renderer import HtmlRenderer
from .scope import VariableScope
from .snippets import SnippetLibrary
from .tree import NON_VOID_TAGS, TAB_SIZE, Element, TreeBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileOptions:
    content_root: Path = Path('include')
    base_dir: Path = Path('.')
    output_extension: str = 'html'
    tab_size: int = TAB_SIZE
    text_break: bool = False
    open_tags: FrozenSet[str] = field(default=NON_VOID_TAGS)


class MdhtmlCompiler:
    """
    Mdhtml Compiler
    Compiles one mdhtml source file to an HTML document.

    Features:
    - Indentation-based hierarchy (4 columns per level, tabs count as 4)
    - Tag lines (>tag), class shorthand (>.class), quoted attributes, roc=<url> click links
    - File variables (name=value at column 0) substituted into {{name}}
    - Snippet embeds (++name) from a shared SnippetLibrary
    - Folder and markdown-file iteration (for_each_folder=, for_each_md_in_current_folder, ;;;)
    - Padding directives (>code_padding_right, >code_padding_left)
    - Fatal errors carry the source line and, once bound, the file path

    The compiler keeps no state between calls, so one instance can serve
    many threads.
    """

    def __init__(self, snippets: Optional[SnippetLibrary] = None, options: Optional[CompileOptions] = None):
        self.snippets = snippets if snippets is not None else SnippetLibrary()
        self.options = options or CompileOptions()
        self.preprocessor = TemplatePreprocessor(self.snippets,
                                                 content_root=self.options.content_root,
                                                 base_dir=self.options.base_dir,
                                                 output_extension=self.options.output_extension)
        self.builder = TreeBuilder(self.options.tab_size, self.options.open_tags)
        self.renderer = HtmlRenderer(self.options.text_break)

    def preprocess(self, source: str) -> List[Line]:
        return self.preprocessor.preprocess(source, VariableScope())

    def parse(self, source: str) -> List[Element]:
        return self.builder.build(self.preprocess(source))

    def compile(self, source: str) -> str:
        """Compiles mdhtml source code to an HTML document."""
        return self.renderer.render_document(self.parse(source))

    def compile_file(self, src, dst) -> Path:
        """Compiles `src` into `dst`, binding the source path to any CompileError."""
        src, dst = Path(src), Path(dst)
        try:
            source = src.read_text(encoding='utf-8')
            html = self.compile(source)
            dst.parent.mkdir(parents=True, exist_ok=True)
            dst.write_text(html, encoding='utf-8')
        except CompileError as e:
            raise e.with_path(src)
        except (OSError, UnicodeError) as e:
            raise SourceIOError(str(e), path=str(src)) from e
        logger.debug("Compiled %s -> %s", src, dst)
        return dst
