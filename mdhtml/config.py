"""
Site configuration, read from a YAML file such as::

    content: include        # sources (*.md) and assets to copy
    output: public          # recreated on every build
    embed: embed            # snippet library for ++name
    output_extension: html
    tab_size: 4
    text_break: false
    open_tags: [div, span, script]
    workers: 8
    watch: ["theme/*.css"]  # extra globs that trigger a rebuild

Relative paths resolve against the directory holding the config file.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

import yaml

from .compiler import CompileOptions
from .tree import NON_VOID_TAGS, TAB_SIZE


class ConfigError(ValueError):
    pass


@dataclass
class SiteConfig:
    base_dir: Path = field(default_factory=Path.cwd)
    content: Path = Path('include')
    output: Path = Path('public')
    embed: Path = Path('embed')
    output_extension: str = 'html'
    tab_size: int = TAB_SIZE
    text_break: bool = False
    open_tags: FrozenSet[str] = NON_VOID_TAGS
    workers: Optional[int] = None
    watch: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.base_dir = Path(self.base_dir)
        self.content = self.base_dir / self.content
        self.output = self.base_dir / self.output
        self.embed = self.base_dir / self.embed

    def compile_options(self) -> CompileOptions:
        return CompileOptions(content_root=self.content,
                              base_dir=self.base_dir,
                              output_extension=self.output_extension,
                              tab_size=self.tab_size,
                              text_break=self.text_break,
                              open_tags=self.open_tags)


_TYPES: Dict[str, Any] = {
    'content': str,
    'output': str,
    'embed': str,
    'output_extension': str,
    'tab_size': int,
    'text_break': bool,
    'open_tags': list,
    'workers': int,
    'watch': list,
}


def config_from_dict(cfg: Optional[Dict[str, Any]], base_dir=None) -> SiteConfig:
    cfg = cfg or {}
    if not isinstance(cfg, dict):
        raise ConfigError("Config must be a mapping of keys to values.")
    unknown = sorted(set(cfg) - set(_TYPES))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    for key, value in cfg.items():
        expected = _TYPES[key]
        # bool is an int subclass; tab_size: true is still a mistake
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(f"Config key '{key}' must be of type {expected.__name__}, got {value!r}")

    kwargs: Dict[str, Any] = dict(cfg)
    for key in ('content', 'output', 'embed'):
        if key in kwargs:
            kwargs[key] = Path(kwargs[key])
    if 'output_extension' in kwargs:
        kwargs['output_extension'] = kwargs['output_extension'].lstrip('.')
    if 'open_tags' in kwargs:
        kwargs['open_tags'] = frozenset(str(tag) for tag in kwargs['open_tags'])
    if kwargs.get('tab_size', TAB_SIZE) < 1:
        raise ConfigError("Config key 'tab_size' must be at least 1.")
    if kwargs.get('workers', 1) < 1:
        raise ConfigError("Config key 'workers' must be at least 1.")
    return SiteConfig(base_dir=Path(base_dir) if base_dir is not None else Path.cwd(), **kwargs)


def load_config(path=None) -> SiteConfig:
    """Loads a YAML site config; without a path every default applies to the working directory."""
    if path is None:
        return SiteConfig()
    path = Path(path)
    try:
        with open(path, "r", encoding='utf-8') as f:
            cfg = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in '{path}': {e}") from e
    return config_from_dict(cfg, base_dir=path.resolve().parent)
