from pathlib import Path

import pytest


def write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


@pytest.fixture
def docs_tree(tmp_path):
    """include/docs/{a,b} folders with env.conf titles A and B."""
    write(tmp_path, 'include/docs/a/env.conf', 'title=A\n')
    write(tmp_path, 'include/docs/b/env.conf', 'title=B\nbroken=line=here\n')
    return tmp_path


@pytest.fixture
def posts_tree(tmp_path):
    write(tmp_path, 'include/posts/one/first.md', 'title=First\n>p body\n    indented=skipped\n')
    write(tmp_path, 'include/posts/one/second.md', 'title=Second\n')
    write(tmp_path, 'include/posts/one/notes.txt', 'title=Ignored\n')
    return tmp_path
