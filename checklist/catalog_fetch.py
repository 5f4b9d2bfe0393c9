from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List

import httpx
from loguru import logger
from pydantic import ValidationError

from .config import (
    CATALOG_API_URL,
    HTTP_CONNECT_TIMEOUT,
    HTTP_READ_TIMEOUT,
    HTTP_USER_AGENT,
    CandidateItem,
)
from .errors import UpstreamFetchFailure


class OrderKey(str, Enum):
    RECENCY = "recency"
    REQUEST_FREQUENCY = "request_frequency"


ORDER_BY: Dict[OrderKey, str] = {
    OrderKey.RECENCY: "{createdAt: DESC}",
    OrderKey.REQUEST_FREQUENCY: "{replyRequestCount: DESC}",
}

LIST_ARTICLE_FIELDS = """
  edges {
    node {
      id
      text
      hyperlinks {
        url
        title
      }
      replyCount
    }
  }
"""


def _http_client() -> httpx.Client:
    return httpx.Client(
        headers={"User-Agent": HTTP_USER_AGENT},
        timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
    )


def unanswered_query(count: int, order: OrderKey) -> str:
    return (
        "{\n"
        f"  ListArticles(first: {count}, orderBy: {ORDER_BY[order]}, "
        "filter: {replyCount: {EQ: 0}}) {"
        f"{LIST_ARTICLE_FIELDS}"
        "  }\n"
        "}"
    )


def low_feedback_query(count: int) -> str:
    return (
        "{\n"
        f"  ListArticles(first: {count}, orderBy: {{createdAt: DESC}}, "
        "filter: {replyCount: {GTE: 1}, hasArticleReplyWithMorePositiveFeedback: false}) {"
        f"{LIST_ARTICLE_FIELDS}"
        "  }\n"
        "}"
    )


def _parse_articles(payload: Any) -> List[CandidateItem]:
    if not isinstance(payload, dict):
        raise UpstreamFetchFailure(f"Unexpected catalog response: {type(payload).__name__} body")

    if payload.get("errors"):
        errors = payload["errors"] if isinstance(payload["errors"], list) else [payload["errors"]]
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
        )
        raise UpstreamFetchFailure(f"Catalog query returned errors: {messages}")

    try:
        edges = payload["data"]["ListArticles"]["edges"]
        nodes = [dict(edge["node"]) for edge in edges]
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamFetchFailure(f"Unexpected catalog response shape: {e!r}") from e

    items: List[CandidateItem] = []
    for node in nodes:
        node["text"] = node.get("text") or ""
        node["hyperlinks"] = node.get("hyperlinks") or []
        node["replyCount"] = node.get("replyCount") or 0
        try:
            items.append(CandidateItem.model_validate(node))
        except ValidationError as e:
            raise UpstreamFetchFailure(f"Invalid article node {node.get('id')!r}: {e}") from e
    return items


class CatalogSource:
    """
    Candidate pools backed by the catalog GraphQL API.

    `count` is an upper bound hint; the service may return fewer articles.
    Every failure surfaces as UpstreamFetchFailure, with no retry.
    """

    def __init__(self, api_url: str = CATALOG_API_URL, client: httpx.Client | None = None):
        self.api_url = api_url
        self._client = client

    def _post(self, query: str) -> List[CandidateItem]:
        client = self._client or _http_client()
        try:
            r = client.post(
                self.api_url,
                json={"query": query, "operationName": None, "variables": None},
            )
        except httpx.HTTPError as e:
            raise UpstreamFetchFailure(f"Request to {self.api_url} failed: {e}") from e
        finally:
            if self._client is None:
                client.close()

        if r.status_code >= 400:
            raise UpstreamFetchFailure(f"HTTP {r.status_code} from {self.api_url}")
        try:
            payload = r.json()
        except ValueError as e:
            raise UpstreamFetchFailure(f"Non-JSON response from {self.api_url}") from e
        return _parse_articles(payload)

    def fetch_unanswered(self, count: int, order: OrderKey) -> List[CandidateItem]:
        if count <= 0:
            return []
        logger.debug("Fetching {} unanswered articles ordered by {}", count, order.value)
        return self._post(unanswered_query(count, order))

    def fetch_low_feedback_answered(self, count: int) -> List[CandidateItem]:
        if count <= 0:
            return []
        logger.debug("Fetching {} answered articles lacking positive feedback", count)
        return self._post(low_feedback_query(count))
