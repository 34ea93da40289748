from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

from .errors import ParseError
from .preprocessor import Line

TAB_SIZE = 4
NON_VOID_TAGS = frozenset({'div'})
PADDING_RIGHT = '>code_padding_right'
PADDING_LEFT = '>code_padding_left'
QUOTES = ('"', "'")


@dataclass
class Element:
    """One node of the output tree. A node without a tag is raw text."""
    tag: Optional[str]
    depth: int = 0
    attributes: List[str] = field(default_factory=list)
    content: Optional[str] = None
    children: List['Element'] = field(default_factory=list)
    void: bool = True
    line: Optional[int] = None

    @property
    def is_text(self) -> bool:
        return self.tag is None

    def append(self, child: 'Element'):
        self.children.append(child)
        self.void = False


def click_attribute(url: str) -> str:
    return f"onclick=\"window.location='{url}'\""


def _is_attribute_name(token: str) -> bool:
    name = token[:-1]
    return token.endswith('=') and bool(name) and not any(c.isspace() or c in '="\'' for c in name)


def tokenize_attributes(text: str, line: Optional[int] = None) -> Tuple[List[str], List[str]]:
    """
    Splits the rest of a tag line into attribute tokens and content words.

    A token becomes an attribute when a quote opens right after `name=`; the
    value runs to the matching quote and may hold spaces or `=`. `roc=<url>`
    becomes a click-navigation attribute. Everything else is content.
    """
    attributes: List[str] = []
    content: List[str] = []
    token: List[str] = []
    quoted = False
    quote = None
    is_attribute = False

    def finish():
        if not token:
            return
        word = ''.join(token)
        token.clear()
        if word.startswith('roc='):
            attributes.append(click_attribute(word[4:].strip('"\'')))
        elif is_attribute:
            attributes.append(word)
        else:
            content.append(word)

    for char in text:
        if quoted:
            token.append(char)
            if char == quote:
                quoted = False
        elif char.isspace():
            finish()
            is_attribute = False
        elif char in QUOTES and _is_attribute_name(''.join(token)):
            token.append(char)
            quoted, quote, is_attribute = True, char, True
        else:
            token.append(char)
    if quoted:
        raise ParseError(f"Unterminated {quote} in attribute '{''.join(token)}'.", line)
    finish()
    return attributes, content


class TreeBuilder:
    """
    Builds the element forest from resolved lines.

    Depth comes from leading whitespace (a tab counts `tab_size` columns)
    plus the padding counter moved by `>code_padding_right` and
    `>code_padding_left`. `open_elements` holds the last element seen at
    each depth, so a line at depth d hangs under `open_elements[d - 1]`.
    """

    def __init__(self, tab_size: int = TAB_SIZE, open_tags: Iterable[str] = NON_VOID_TAGS):
        self.tab_size = tab_size
        self.open_tags: FrozenSet[str] = frozenset(open_tags)

    def indent_width(self, text: str) -> int:
        width = 0
        for char in text:
            if char == '\t':
                width += self.tab_size
            elif char.isspace():
                width += 1
            else:
                break
        return width

    def build(self, lines: Iterable[Union[Line, str]]) -> List[Element]:
        roots: List[Element] = []
        open_elements: List[Element] = []
        padding = 0
        for number, line in enumerate(lines, start=1):
            if isinstance(line, Line):
                number, text = line
            else:
                text = line
            stripped = text.strip()
            if not stripped:
                continue

            first = stripped.split(None, 1)[0]
            if first == PADDING_RIGHT:
                padding += 1
                continue
            if first == PADDING_LEFT:
                padding -= 1
                continue

            depth = self.indent_width(text) // self.tab_size + padding
            element = self.parse_line(stripped, depth, number)

            if depth < 0:
                raise ParseError(f"Line resolves to negative depth {depth}; too many '{PADDING_LEFT}'.", number)
            if depth == 0:
                roots.append(element)
            else:
                if len(open_elements) < depth:
                    raise ParseError(f"No open element at depth {depth - 1} to hold '{stripped}'.", number)
                parent = open_elements[depth - 1]
                if parent.is_text:
                    raise ParseError(f"Text on line {parent.line} cannot hold nested lines.", number)
                parent.append(element)
            del open_elements[depth:]
            open_elements.append(element)
        return roots

    def parse_line(self, stripped: str, depth: int, number: Optional[int] = None) -> Element:
        if not stripped.startswith('>'):
            return Element(None, depth, content=stripped, void=False, line=number)

        parts = stripped.split(None, 1)
        name = parts[0][1:]
        rest = parts[1] if len(parts) > 1 else ''
        attributes, words = tokenize_attributes(rest, number)
        void = True
        if name.startswith('.'):
            if len(name) == 1:
                raise ParseError("Class shorthand '>.' needs a class name.", number)
            attributes.append(f'class="{name[1:]}"')
            name = 'div'
            void = False
        elif not name:
            raise ParseError("Tag line is missing its tag name after '>'.", number)
        if name in self.open_tags:
            void = False
        return Element(name, depth, attributes, ' '.join(words) if words else None, void=void, line=number)


def parse(lines: Iterable[Union[Line, str]], tab_size: int = TAB_SIZE) -> List[Element]:
    return TreeBuilder(tab_size).build(lines)
