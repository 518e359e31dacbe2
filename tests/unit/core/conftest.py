"""Shared fixtures for core unit tests"""

from datetime import datetime

import pytest
from markdown_it import MarkdownIt

from mdarticle.core.models import Document, Metadata
from mdarticle.core.parse import make_parser


# Markdown without any extended syntax; renders identically with and without the extensions.
PLAIN_MD = """\
# Heading 1

A paragraph with **bold**, *emphasis*, `code <x>` and a [link](http://example.com "Title").
Second line of the same paragraph.\\
After a hard break & an &copy; entity.

## Heading 2

- item one
- item two
  - nested item

3. third
4. fourth

5. fifth

> A blockquote with ~~struck~~ text.

```python
print("hello") < 1
```

    indented code

---

<div class="raw">
raw html block
</div>

Inline <span>html</span> and <http://example.org>.

| left | center | right |
|:-----|:------:|------:|
| a    | b      | c     |
| d    | e      | f     |

![a fox](fox.png "Fox")
"""

T1 = datetime(2024, 1, 2, 3, 4, 5)
T2 = datetime(2024, 2, 3, 4, 5, 6)


@pytest.fixture(name="md")
def md_fixture():
    """Parser with both extension rules."""
    return make_parser()


@pytest.fixture(name="base_md")
def base_md_fixture():
    """Plain markdown-it parser with the same preset and no extensions."""
    return MarkdownIt("gfm-like", options_update={"linkify": False})


@pytest.fixture(name="metadata")
def metadata_fixture():
    return Metadata(title="A", created=T1, modified=T2, tags=["x"])


@pytest.fixture(name="plain_md")
def plain_md_fixture():
    return PLAIN_MD


@pytest.fixture(name="make_doc")
def make_doc_fixture():
    """Factory for Documents with fixed timestamps."""
    def _make(title=None, slug=None, body="hello", **extra) -> Document:
        return Document(
            metadata=Metadata(title=title, slug=slug, created=T1, modified=T2, **extra),
            body=body,
        )
    return _make
