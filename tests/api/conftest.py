"""Fixtures for lookup service tests."""

import msgspec
import pytest

RFC_2616_BIBTEX = """@misc{rfc2616,
    series =    {Request for Comments},
    number =    2616,
    howpublished =  {RFC 2616},
    publisher = {RFC Editor},
    doi =       {10.17487/RFC2616},
    url =       {https://www.rfc-editor.org/info/rfc2616},
    author =    {Henrik Frystyk Nielsen and Larry M Masinter and Tim Berners-Lee},
    title =     {{Hypertext Transfer Protocol -- HTTP/1.1}},
    pagetotal = 176,
    year =      1999,
    month =     jun,
}
"""

DOI_BIBTEX = """ @article{Lamport_1978, title={Time, clocks, and the ordering of events
in a distributed system}, volume={21}, DOI={10.1145/359545.359563},
journal={Communications of the ACM}, publisher={Association for Computing Machinery
(ACM)}, author={Lamport, Leslie}, year={1978}, month=jul, pages={558--565} }
"""


class RecordingClient:
    """Client double serving canned bodies and recording requested URLs."""

    def __init__(self, text: str = "", json: object | None = None):
        self.text = text
        self.json = json
        self.urls: list[str] = []
        self.closed = False

    def get_text(self, url: str) -> str:
        self.urls.append(url)
        return self.text

    def get_json(self, url: str, type):
        self.urls.append(url)
        return msgspec.json.decode(msgspec.json.encode(self.json), type=type)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.closed = True


@pytest.fixture
def rfc_bibtex():
    return RFC_2616_BIBTEX


@pytest.fixture
def doi_bibtex():
    return DOI_BIBTEX


@pytest.fixture
def recording_client():
    """Factory for clients answering with the given text or JSON."""

    def make(text: str = "", json: object | None = None) -> RecordingClient:
        return RecordingClient(text, json)

    return make


@pytest.fixture
def volume_json():
    """Google Books answer for a single volume."""
    return {
        "kind": "books#volumes",
        "totalItems": 1,
        "items": [
            {
                "volumeInfo": {
                    "title": "The TeXbook",
                    "authors": ["Donald E. Knuth"],
                    "publisher": "Addison-Wesley",
                    "publishedDate": "1984-01",
                }
            }
        ],
    }
