import httpx
import pytest

from patron_reconciler.errors import VocabularyUnavailableError
from patron_reconciler.models import TagMapping
from patron_reconciler.vocabulary import TagVocabularyClient, build_vocabulary

URL = "https://vocabulary.invalid/api/v1/tags"


def _client(handler):
    return TagVocabularyClient(url=URL, timeout=1, transport=httpx.MockTransport(handler))


def test_fetch_builds_lookup():
    def handler(request):
        assert request.method == "GET"
        assert str(request.url) == URL
        return httpx.Response(200, json=[
            {"id": "1", "name": "Student Scholar", "mapped_name": "Scholar"},
            {"id": "2", "name": "Board", "mapped_name": "Board Member"},
        ])

    assert _client(handler).fetch() == {"Student Scholar": "Scholar", "Board": "Board Member"}


def test_first_mapping_for_a_name_wins():
    vocabulary = build_vocabulary([
        TagMapping(name="Board", mapped_name="Board Member"),
        TagMapping(name="Board", mapped_name="Trustee"),
    ])
    assert vocabulary == {"Board": "Board Member"}


def test_http_error_is_unavailable():
    with pytest.raises(VocabularyUnavailableError):
        _client(lambda request: httpx.Response(503)).fetch()


def test_transport_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(VocabularyUnavailableError):
        _client(handler).fetch()


@pytest.mark.parametrize("body", [b"not json", b'{"name": "x"}', b'[{"name": "x"}]'])
def test_malformed_body_is_unavailable(body):
    with pytest.raises(VocabularyUnavailableError):
        _client(lambda request: httpx.Response(200, content=body)).fetch()
