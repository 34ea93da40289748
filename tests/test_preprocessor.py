import pytest

from mdhtml.errors import DirectiveError, SourceIOError
from mdhtml.preprocessor import Line, TemplatePreprocessor, split_source
from mdhtml.scope import VariableScope
from mdhtml.snippets import SnippetLibrary


def texts(lines):
    return [line.text for line in lines]


def make(tmp_path=None, snippets=None):
    root = tmp_path if tmp_path is not None else '.'
    return TemplatePreprocessor(SnippetLibrary(snippets or {}),
                                content_root=f"{root}/include", base_dir=root)


def test_split_source_numbers_lines():
    assert split_source("a\n\nb") == [Line(1, 'a'), Line(2, ''), Line(3, 'b')]


def test_assignment_is_recorded_and_removed():
    scope = VariableScope()
    lines = make().preprocess("title=Home\n>h1 {{title}} {{missing}}", scope)
    assert lines == [Line(2, '>h1 Home {{missing}}')]
    assert scope.get('title') == 'Home'


def test_assignment_value_keeps_later_equals_signs():
    scope = VariableScope()
    lines = make().preprocess("query=a=b=c\n>p {{query}}", scope)
    assert scope.get('query') == 'a=b=c'
    assert texts(lines) == ['>p a=b=c']


def test_indented_or_tag_lines_are_not_assignments():
    lines = make().preprocess('>a href="x" go\n    k=v')
    assert texts(lines) == ['>a href="x" go', '    k=v']


def test_blank_lines_are_dropped():
    assert texts(make().preprocess(">p a\n\n   \n>p b")) == ['>p a', '>p b']


def test_embed_reindents_snippet_lines():
    pre = make(snippets={'footer': ['  >p Contact us']})
    lines = pre.preprocess(">body\n    ++footer")
    assert lines == [Line(1, '>body'), Line(2, '      >p Contact us')]


def test_embed_substitutes_current_variables():
    pre = make(snippets={'greet': ['>p Hi {{name}}']})
    assert texts(pre.preprocess("name=Ann\n++greet")) == ['>p Hi Ann']


def test_unknown_snippet_is_skipped():
    assert texts(make().preprocess(">p before\n++nothing\n>p after")) == ['>p before', '>p after']


def test_for_each_folder_expands_per_subfolder(docs_tree):
    source = "for_each_folder=include/docs\n>h1 {{title}}\n>a roc=/{{url}} go\n;;;\n>p end"
    assert texts(make(docs_tree).preprocess(source)) == [
        '>h1 A', '>a roc=/docs/a go',
        '>h1 B', '>a roc=/docs/b go',
        '>p end',
    ]


def test_expanded_lines_keep_source_numbers(docs_tree):
    lines = make(docs_tree).preprocess("for_each_folder=include/docs\n    >h1 {{title}}\n;;;")
    assert lines == [Line(2, '    >h1 A'), Line(2, '    >h1 B')]


def test_for_each_md_in_current_folder(posts_tree):
    source = "\n".join([
        "for_each_folder=include/posts",
        ">h2 {{url}}",
        "for_each_md_in_current_folder",
        '>a href="/{{url}}" {{title}}',
        ";;;",
        ">hr",
        ";;;",
    ])
    assert texts(make(posts_tree).preprocess(source)) == [
        '>h2 posts/one',
        '>a href="/posts/one/first.html" First',
        '>a href="/posts/one/second.html" Second',
        '>hr',
    ]


def test_markdown_body_falls_back_to_folder_metadata(posts_tree):
    (posts_tree / 'include/posts/one/env.conf').write_text('section=Posts\n')
    source = "for_each_folder=include/posts\nfor_each_md_in_current_folder\n>p {{section}}: {{title}}\n;;;\n;;;"
    assert texts(make(posts_tree).preprocess(source)) == ['>p Posts: First', '>p Posts: Second']


def test_empty_markdown_loop_emits_nothing(docs_tree):
    source = "for_each_folder=include/docs\n>h1 {{title}}\nfor_each_md_in_current_folder\n>p {{title}}\n;;;\n;;;"
    assert texts(make(docs_tree).preprocess(source)) == ['>h1 A', '>h1 B']


def test_variables_leak_forward_across_iterations(docs_tree):
    source = "for_each_folder=include/docs\n>h1 {{title}} {{seen}}\nseen={{title}}\n;;;"
    assert texts(make(docs_tree).preprocess(source)) == ['>h1 A {{seen}}', '>h1 B A']


def test_tag_lines_are_never_directives(docs_tree):
    source = ">for_each_folder=include/docs\n>p ;;;"
    assert texts(make(docs_tree).preprocess(source)) == ['>for_each_folder=include/docs', '>p ;;;']


def test_missing_terminator(docs_tree):
    with pytest.raises(DirectiveError) as info:
        make(docs_tree).preprocess(">p x\nfor_each_folder=include/docs\n>h1 {{title}}")
    assert info.value.line == 2
    assert info.value.category == 'directive'


def test_missing_folder_path():
    with pytest.raises(DirectiveError) as info:
        make().preprocess("for_each_folder=\n;;;")
    assert info.value.line == 1


def test_stray_terminator():
    with pytest.raises(DirectiveError) as info:
        make().preprocess(">p a\n;;;")
    assert info.value.line == 2


def test_markdown_loop_outside_folder_loop():
    with pytest.raises(DirectiveError) as info:
        make().preprocess(">p a\nfor_each_md_in_current_folder\n>p {{title}}\n;;;")
    assert info.value.line == 2


def test_unreadable_folder(tmp_path):
    with pytest.raises(SourceIOError) as info:
        make(tmp_path).preprocess("for_each_folder=include/nope\n>p x\n;;;")
    assert info.value.line == 1
    assert info.value.category == 'io'
