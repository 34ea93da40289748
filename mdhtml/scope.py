import re
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .errors import SourceIOError

PLACEHOLDER_RE = re.compile(r"\{\{([^{}]*)\}\}")
SETTINGS_FILE = 'env.conf'
SOURCE_EXTENSION = 'md'


def substitute(line: str, lookup: Mapping[str, str]) -> str:
    """Replaces every {{key}} bound in `lookup`; unbound placeholders stay as written."""
    if '{{' not in line:
        return line

    def replace(match):
        value = lookup.get(match.group(1).strip())
        return match.group(0) if value is None else value

    return PLACEHOLDER_RE.sub(replace, line)


class VariableScope:
    """
    Variables assigned with `name=value` lines of one source file.

    The scope is flat: a later assignment overwrites an earlier one and
    nothing is reset between iterations of an expanded loop body.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self.variables: Dict[str, str] = dict(initial or {})

    def assign(self, name: str, value: str):
        self.variables[name] = value

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(name, default)

    def substitute(self, line: str) -> str:
        return substitute(line, self.variables)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.variables)

    def __contains__(self, name) -> bool:
        return name in self.variables

    def __len__(self) -> int:
        return len(self.variables)


def parse_settings(text: str) -> Dict[str, str]:
    """Reads `key=value` lines, ignoring any line that is not exactly two `=` parts."""
    settings = {}
    for line in text.splitlines():
        parts = line.split('=')
        if len(parts) != 2:
            continue
        settings[parts[0]] = parts[1]
    return settings


def relative_url(path: Path, content_root: Path) -> str:
    try:
        return path.relative_to(content_root).as_posix()
    except ValueError:
        return path.as_posix()


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except (OSError, UnicodeError) as e:
        raise SourceIOError(f"Cannot read '{path}': {e}", path=str(path)) from e


def folder_metadata(folder: Path, content_root: Path) -> Mapping[str, str]:
    """Metadata of one folder: its env.conf settings plus a synthetic `url`."""
    settings: Dict[str, str] = {}
    settings_file = folder / SETTINGS_FILE
    if settings_file.is_file():
        settings.update(parse_settings(_read_text(settings_file)))
    settings['url'] = relative_url(folder, content_root)
    return MappingProxyType(settings)


def is_metadata_line(line: str) -> bool:
    return '=' in line and not line[:1].isspace() and not line.startswith('>')


def file_metadata(md_file: Path, content_root: Path, output_extension: str = 'html') -> Mapping[str, str]:
    """
    Metadata of one markdown file: its top-level `key=value` lines plus a
    synthetic `url` pointing at the compiled output of that file.
    """
    settings: Dict[str, str] = {}
    for line in _read_text(md_file).splitlines():
        if not is_metadata_line(line):
            continue
        parts = line.split('=')
        if len(parts) != 2:
            continue
        settings[parts[0]] = parts[1]
    settings['url'] = relative_url(md_file.with_suffix('.' + output_extension), content_root)
    return MappingProxyType(settings)
