from typing import Iterable, List

from .tree import Element

DOCUMENT_START = '<!DOCTYPE html>\n<html>\n'
DOCUMENT_END = '</html>'
TEXT_BREAK = '<br>'


class HtmlRenderer:
    """
    Serializes element trees to HTML, indenting each node by `depth` tabs.

    `text_break` appends a <br> to every raw text node.
    """

    def __init__(self, text_break: bool = False):
        self.text_break = text_break

    def render_element(self, element: Element) -> str:
        return '\n'.join(self._lines(element))

    def _lines(self, element: Element) -> List[str]:
        tabs = '\t' * element.depth
        if element.is_text:
            return [f"{tabs}{element.content}{TEXT_BREAK if self.text_break else ''}"]

        attrs = ''.join(' ' + attr for attr in element.attributes)
        opening = f"<{element.tag}{attrs}>"
        closing = f"</{element.tag}>"

        if not element.children:
            if element.content is not None:
                return [f"{tabs}{opening}{element.content}{closing}"]
            if element.void:
                return [f"{tabs}<{element.tag}{attrs}/>"]
            return [f"{tabs}{opening}{closing}"]

        lines = [tabs + opening]
        if element.content is not None:
            lines.append(f"{tabs}\t{element.content}")
        for child in element.children:
            lines.extend(self._lines(child))
        lines.append(tabs + closing)
        return lines

    def render_document(self, roots: Iterable[Element]) -> str:
        body = ''.join(self.render_element(root) + '\n' for root in roots)
        return DOCUMENT_START + body + DOCUMENT_END
