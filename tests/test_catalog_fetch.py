import httpx
import pytest

from checklist import catalog_fetch
from checklist.catalog_fetch import CatalogSource, OrderKey
from checklist.errors import UpstreamFetchFailure


class DummyResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def _payload(*nodes):
    return {"data": {"ListArticles": {"edges": [{"node": n} for n in nodes]}}}


def test_fetch_unanswered_parses_nodes(monkeypatch):
    sent = {}

    def fake_post(self, url, json=None):
        sent["url"] = url
        sent["query"] = json["query"]
        return DummyResponse(
            _payload(
                {"id": "a1", "text": "hi", "hyperlinks": [{"url": "http://x", "title": "X"}], "replyCount": 0},
                {"id": "a2", "text": None, "hyperlinks": None, "replyCount": 0},
            )
        )

    monkeypatch.setattr(catalog_fetch.httpx.Client, "post", fake_post)
    items = CatalogSource(api_url="https://example.com/graphql").fetch_unanswered(5, OrderKey.REQUEST_FREQUENCY)

    assert sent["url"] == "https://example.com/graphql"
    assert "first: 5" in sent["query"]
    assert "replyRequestCount: DESC" in sent["query"]
    assert "replyCount: {EQ: 0}" in sent["query"]
    assert [i.id for i in items] == ["a1", "a2"]
    assert items[0].hyperlinks[0].title == "X"
    assert items[1].text == ""
    assert items[1].hyperlinks == []


def test_fetch_low_feedback_query(monkeypatch):
    sent = {}

    def fake_post(self, url, json=None):
        sent["query"] = json["query"]
        return DummyResponse(_payload({"id": "b1", "text": "t", "hyperlinks": [], "replyCount": 2}))

    monkeypatch.setattr(catalog_fetch.httpx.Client, "post", fake_post)
    items = CatalogSource().fetch_low_feedback_answered(3)
    assert "hasArticleReplyWithMorePositiveFeedback: false" in sent["query"]
    assert "createdAt: DESC" in sent["query"]
    assert items[0].reply_count == 2


def test_zero_count_skips_request(monkeypatch):
    def boom(self, url, json=None):
        raise AssertionError("should not be called")

    monkeypatch.setattr(catalog_fetch.httpx.Client, "post", boom)
    assert CatalogSource().fetch_unanswered(0, OrderKey.RECENCY) == []
    assert CatalogSource().fetch_low_feedback_answered(0) == []


@pytest.mark.parametrize(
    "response",
    [
        DummyResponse({"data": None}, status_code=500),
        DummyResponse(None),
        DummyResponse({"errors": [{"message": "bad query"}]}),
        DummyResponse({"data": {}}),
        DummyResponse([]),
        DummyResponse({"errors": "boom"}),
        DummyResponse({"data": {"ListArticles": {"edges": None}}}),
        DummyResponse({"data": {"ListArticles": {"edges": [{"node": None}]}}}),
        DummyResponse({"data": {"ListArticles": {"edges": [{}]}}}),
        DummyResponse({"data": {"ListArticles": {"edges": ["not-an-edge"]}}}),
    ],
)
def test_bad_responses_raise(monkeypatch, response):
    monkeypatch.setattr(catalog_fetch.httpx.Client, "post", lambda self, url, json=None: response)
    with pytest.raises(UpstreamFetchFailure):
        CatalogSource().fetch_unanswered(2, OrderKey.RECENCY)


def test_transport_error_raises(monkeypatch):
    def fail(self, url, json=None):
        raise httpx.ConnectError("down")

    monkeypatch.setattr(catalog_fetch.httpx.Client, "post", fail)
    with pytest.raises(UpstreamFetchFailure):
        CatalogSource().fetch_low_feedback_answered(2)
