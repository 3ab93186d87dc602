"""Fixtures for core model tests."""

import pytest

from bibadd.core.fields import EntryKind, EntryType
from bibadd.core.resolver import FieldResolver


@pytest.fixture
def article_kind():
    return EntryKind.of(EntryType.ARTICLE)


@pytest.fixture
def manual_kind():
    return EntryKind.of(EntryType.MANUAL)


@pytest.fixture
def complete_article(article_kind):
    """Resolver with every field an article requires."""
    resolver = FieldResolver(article_kind, "knuth1984")
    resolver.set_author("Donald E. Knuth")
    resolver.set_title("Literate Programming")
    resolver.set_journal("The Computer Journal")
    resolver.set_year("1984")
    resolver.set_field("pages", "97--111")
    return resolver


@pytest.fixture
def incomplete_article(article_kind):
    """Article resolver missing journal and year."""
    resolver = FieldResolver(article_kind, "draft")
    resolver.set_author("Jane Doe")
    resolver.set_title("Unfinished Work")
    return resolver


@pytest.fixture
def sample_bibtex():
    """BibTeX covering several kinds and value forms."""
    return """
% A comment line before the first record
@string{tcj = "The Computer Journal"}

@article{knuth1984,
    author = {Donald E. Knuth},
    title = {{Literate} Programming},
    journal = tcj,
    year = 1984,
    pages = {97--111},
}

@inproceedings{lamport1978,
    author = "Leslie Lamport",
    title = "Time, Clocks, and the Ordering of Events",
    booktitle = {Proceedings of the {ACM}},
    year = {1978}
}

@misc{web-page,
    title = {A page on the {Web}},
    note = {Visited} # { today},
}
"""
