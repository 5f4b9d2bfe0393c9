import re
from enum import Enum
from typing import List, Tuple

from .config import CandidateItem

_LINE_BREAK_RE = re.compile(r"\n|\r")


class ArticleState(str, Enum):
    NEW = "new"
    ANSWERED = "answered"

    @property
    def marker(self) -> str:
        return "🆕" if self is ArticleState.NEW else "🈶"


def article_state(item: CandidateItem) -> ArticleState:
    return ArticleState.ANSWERED if item.reply_count > 0 else ArticleState.NEW


def single_line(text: str) -> str:
    # each \r and \n becomes one space, so "\r\n" gives two
    return _LINE_BREAK_RE.sub(" ", text or "")


def article_text(item: CandidateItem) -> str:
    """
    Article text on one line, with titled hyperlinks rewritten as
    markdown links.

    Only the first occurrence of each url is rewritten, in hyperlink order.
    Spans produced by an earlier rewrite are never matched again.
    """
    # (segment, already_linked)
    segments: List[Tuple[str, bool]] = [(single_line(item.text), False)]

    for link in item.hyperlinks:
        if not link.title or not link.url:
            continue
        for idx, (seg, linked) in enumerate(segments):
            if linked:
                continue
            pos = seg.find(link.url)
            if pos < 0:
                continue
            pieces = [
                (seg[:pos], False),
                (f"[{link.title}]({link.url})", True),
                (seg[pos + len(link.url):], False),
            ]
            segments[idx:idx + 1] = [p for p in pieces if p[0]]
            break

    return "".join(seg for seg, _ in segments)
