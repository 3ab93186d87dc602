"""Shared fixtures for storage tests."""

import pytest

from bibadd.core.bibtex import BibtexFormat
from bibadd.storage.parser import BibtexParser

MANUAL_BIBTEX = "@manual{guide,\n    title = {User Guide},\n}\n"


@pytest.fixture
def manual_bibtex():
    """Contents of the file in bib_dir."""
    return MANUAL_BIBTEX


@pytest.fixture
def parser():
    """Fresh BibTeX parser."""
    return BibtexParser()


@pytest.fixture
def bibtex():
    return BibtexFormat


@pytest.fixture
def bib_dir(tmp_path):
    """Directory holding a single bibliography file."""
    directory = tmp_path / "bibs"
    directory.mkdir()
    (directory / "refs.bib").write_text(MANUAL_BIBTEX, encoding="utf-8")
    return directory
