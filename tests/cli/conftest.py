"""Pytest configuration and fixtures for CLI tests.

Commands run inside an empty working directory so bibliography discovery
and creation never touch real files. Lookup services and prompts are
patched per test.
"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from bibadd.core.bibtex import BibtexFormat

BOOK_BIBTEX = """@book{knuth1984,
    author = {Donald E. Knuth},
    title = {The {TeX}book},
    publisher = {Addison-Wesley},
    year = {1984},
    isbn = {0201134470},
}
"""

ARTICLE_BIBTEX = """@article{Lamport_1978,
    author = {Lamport, Leslie},
    title = {Time, clocks, and the ordering of events in a distributed system},
    journal = {Communications of the ACM},
    year = {1978},
    doi = {10.1145/359545.359563},
}
"""


@pytest.fixture
def book_bibtex():
    return BOOK_BIBTEX


@pytest.fixture
def article_bibtex():
    return ARTICLE_BIBTEX


@pytest.fixture
def cli_runner(workdir):
    """Click CLI test runner invoking bibadd in the working directory."""

    class BibaddCliRunner(CliRunner):
        def invoke(self, args, **kwargs):  # type: ignore
            from bibadd.cli.main import cli

            if isinstance(args, list):
                return super().invoke(cli, args, **kwargs)
            return super().invoke(args, **kwargs)

    return BibaddCliRunner()


@pytest.fixture
def bib_file(workdir):
    """The single bibliography file in the working directory."""
    path = workdir / "refs.bib"
    path.write_text(BOOK_BIBTEX, encoding="utf-8")
    return path


@pytest.fixture
def read_bib():
    """Parse a bibliography file back into a collection."""

    def read(path):
        return BibtexFormat.parse(path.read_text(encoding="utf-8"))

    return read


@pytest.fixture
def answers():
    """Patch prompts to answer from a list, in order."""

    def install(*values):
        replies = iter(values)
        prompts = []

        def ask(prompt, *args, **kwargs):
            prompts.append(prompt)
            return next(replies)

        patcher = patch("bibadd.cli.interact.Prompt.ask", side_effect=ask)
        patcher.start()
        active.append(patcher)
        return prompts

    active = []
    yield install
    for patcher in active:
        patcher.stop()
