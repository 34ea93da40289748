import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .compiler import MdhtmlCompiler
from .config import SiteConfig
from .errors import CompileError, SourceIOError
from .scope import SOURCE_EXTENSION
from .snippets import SnippetLibrary

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    written: List[Path] = field(default_factory=list)
    errors: List[CompileError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def output_path_for(src: Path, config: SiteConfig) -> Path:
    relative = Path(src).relative_to(config.content)
    return config.output / relative.with_suffix('.' + config.output_extension)


def find_sources(content: Path) -> List[Path]:
    return sorted(path for path in content.rglob('*.' + SOURCE_EXTENSION) if path.is_file())


def prepare_output(config: SiteConfig):
    """Recreates the output directory and copies every non-markdown file into it."""
    if config.output.exists():
        shutil.rmtree(config.output)
    config.output.mkdir(parents=True)
    config.content.mkdir(parents=True, exist_ok=True)
    config.embed.mkdir(parents=True, exist_ok=True)
    shutil.copytree(config.content, config.output, dirs_exist_ok=True,
                    ignore=shutil.ignore_patterns('*.' + SOURCE_EXTENSION))


def compile_one(compiler: MdhtmlCompiler, src: Path, config: SiteConfig) -> Optional[CompileError]:
    try:
        compiler.compile_file(src, output_path_for(src, config))
    except CompileError as e:
        logger.error("%s", e)
        return e
    return None


def build_site(config: SiteConfig) -> BuildResult:
    """
    Builds the whole site: assets are copied, the snippet library is loaded
    once, then every markdown source compiles on its own worker thread.
    A failing file is reported in the result and never stops its siblings.
    """
    try:
        prepare_output(config)
        snippets = SnippetLibrary.from_directory(config.embed)
    except CompileError as e:
        return BuildResult(errors=[e])
    except OSError as e:
        return BuildResult(errors=[SourceIOError(f"Cannot prepare output: {e}", path=str(config.output))])

    compiler = MdhtmlCompiler(snippets, config.compile_options())
    sources = find_sources(config.content)
    result = BuildResult()
    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        outcomes = list(pool.map(lambda src: compile_one(compiler, src, config), sources))

    for src, error in zip(sources, outcomes):
        if error is None:
            result.written.append(output_path_for(src, config))
        else:
            result.errors.append(error)
    logger.info("Compiled %d of %d files into %s", len(result.written), len(sources), config.output)
    return result
