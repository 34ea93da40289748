from .compiler import CompileOptions, MdhtmlCompiler
from .config import ConfigError, SiteConfig, load_config
from .errors import CompileError, DirectiveError, ParseError, SourceIOError
from .renderer import HtmlRenderer
from .site import BuildResult, build_site
from .snippets import SnippetLibrary
from .tree import Element, TreeBuilder

__version__ = '0.1.0'
