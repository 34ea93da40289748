from mdhtml.renderer import HtmlRenderer
from mdhtml.tree import Element, parse


def render(lines, **kwargs):
    renderer = HtmlRenderer(**kwargs)
    return [renderer.render_element(root) for root in parse(lines)]


def test_inline_content():
    assert render(['>a roc=/home Home']) == ["<a onclick=\"window.location='/home'\">Home</a>"]


def test_void_and_explicitly_closed_empty_tags():
    assert render(['>br', '>img src="a.png"', '>div', '>.box']) == [
        '<br/>',
        '<img src="a.png"/>',
        '<div></div>',
        '<div class="box"></div>',
    ]


def test_children_without_content():
    assert render(['>ul', '    >li one', '    >li two']) == ['<ul>\n\t<li>one</li>\n\t<li>two</li>\n</ul>']


def test_children_with_content():
    assert render(['>section Intro', '    >p Body']) == ['<section>\n\tIntro\n\t<p>Body</p>\n</section>']


def test_nested_indentation_uses_depth_tabs():
    assert render(['>div', '    >div', '        >span x']) == [
        '<div>\n\t<div>\n\t\t<span>x</span>\n\t</div>\n</div>'
    ]


def test_text_node_with_and_without_break():
    text = Element(None, 1, content='hello')
    assert HtmlRenderer().render_element(text) == '\thello'
    assert HtmlRenderer(text_break=True).render_element(text) == '\thello<br>'


def test_render_document_envelope():
    roots = parse(['>p one', 'two'])
    assert HtmlRenderer().render_document(roots) == '<!DOCTYPE html>\n<html>\n<p>one</p>\ntwo\n</html>'


def test_render_document_empty():
    assert HtmlRenderer().render_document([]) == '<!DOCTYPE html>\n<html>\n</html>'


def test_round_trip_keeps_tags_attributes_and_content():
    lines = ['>nav id="top" class="main menu"', '    >a href="/" data-x="1" Home page']
    html = render(lines)[0]
    assert html == '<nav id="top" class="main menu">\n\t<a href="/" data-x="1">Home page</a>\n</nav>'
