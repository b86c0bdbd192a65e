"""Shared fixtures for core unit tests"""

import pytest

from mdview.core.events import make_parser


SAMPLE_MD = """\
---
title: Sample
---

# Heading 1

A paragraph with **bold** text and a <Counter initial="5"/>.

- item one
- item two

```python
print("hello")
```
"""


@pytest.fixture(name="parser")
def parser_fixture():
    return make_parser()


@pytest.fixture(name="wiki_parser")
def wiki_parser_fixture():
    return make_parser(wikilinks=True)


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD
