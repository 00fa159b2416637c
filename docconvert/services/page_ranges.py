"""Page range parsing for page extraction.

A range string such as ``"3,1-2"`` names 1-based pages. It resolves to a
:class:`PageIndexSet` of 0-based indices kept in the order pages were first
named. Malformed tokens and pages outside the document are ignored rather
than rejected, so a partly wrong range still yields the pages it can.
"""
import logging
from typing import Iterable, Iterator, List, Optional, Set

logger = logging.getLogger(__name__)


class PageIndexSet:
    """Ordered sequence of unique page indices.

    Order is the order of first insertion; adding an index already present
    is a no-op and does not move it.
    """

    def __init__(self, indices: Iterable[int] = ()):
        self._order: List[int] = []
        self._seen: Set[int] = set()
        for index in indices:
            self.add(index)

    def add(self, index: int) -> None:
        if index not in self._seen:
            self._seen.add(index)
            self._order.append(index)

    def __iter__(self) -> Iterator[int]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, index: object) -> bool:
        return index in self._seen

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PageIndexSet):
            return self._order == other._order
        if isinstance(other, list):
            return self._order == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"PageIndexSet({self._order!r})"

    def to_list(self) -> List[int]:
        return list(self._order)


def _parse_page_number(token: str) -> Optional[int]:
    token = token.strip()
    if not token.isdecimal():
        return None
    return int(token)


def _token_indices(token: str, total_pages: int) -> Optional[range]:
    """In-bounds 0-based indices named by one token, or None if malformed."""
    if "-" in token:
        parts = token.split("-")
        if len(parts) != 2:
            return None
        start, end = (_parse_page_number(p) for p in parts)
        if start is None or end is None:
            return None
    else:
        start = end = _parse_page_number(token)
        if start is None:
            return None
    # a reversed range is empty
    return range(max(start - 1, 0), min(end, total_pages))


def select_pages(spec: Optional[str], total_pages: int) -> PageIndexSet:
    """Resolve a range string against a document of ``total_pages`` pages.

    With no range (``None`` or blank) only the first page is selected.
    """
    selection = PageIndexSet()
    if spec is None or not spec.strip():
        if total_pages > 0:
            selection.add(0)
        return selection

    for token in spec.split(","):
        indices = _token_indices(token, total_pages)
        if indices is None:
            logger.debug("Ignoring malformed page range token %r", token)
            continue
        for index in indices:
            selection.add(index)
    return selection
