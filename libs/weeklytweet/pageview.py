import dataclasses as dc
import json
from typing import Any, Dict, Iterable, List


# Raised if the analytics payload cannot be decoded
class AnalyticsError(RuntimeError):
    def __init__(self, message: str, payload: Any = None):
        super(AnalyticsError, self).__init__(message)
        self.payload = payload


@dc.dataclass
class PageView:
    uniques: int
    pathname: str

    @classmethod
    def from_json(cls, entry: Dict[str, Any]) -> "PageView":
        # Fathom reports `uniques` as a decimal string, e.g. {"uniques": "12", "pathname": "/post-1"}
        if not isinstance(entry, dict) or "uniques" not in entry or "pathname" not in entry:
            raise AnalyticsError(f"Malformed page view entry: {entry!r}", entry)
        try:
            uniques = int(entry["uniques"])
        except (TypeError, ValueError) as e:
            raise AnalyticsError(f"Invalid uniques count in {entry!r}", entry) from e
        if not isinstance(entry["pathname"], str):
            raise AnalyticsError(f"Invalid pathname in {entry!r}", entry)
        return cls(uniques=uniques, pathname=entry["pathname"].replace("/", ""))


def parse_page_views(payload: bytes) -> List[PageView]:
    try:
        entries = json.loads(payload)
    except ValueError as e:
        raise AnalyticsError(f"Analytics response is not valid JSON: {e}", payload) from e
    if not isinstance(entries, list):
        raise AnalyticsError("Analytics response must be a JSON array.", payload)
    return [PageView.from_json(entry) for entry in entries]


def aggregate_page_views(page_views: Iterable[PageView], limit: int = 3) -> List[PageView]:
    """
    Merge entries which share a pathname (e.g. `/post` and `/post/`)
    by summing their uniques, and return the `limit` most visited
    pages. Ties keep the order in which pages were first seen.
    """
    merged: Dict[str, PageView] = {}
    for page_view in page_views:
        if page_view.pathname in merged:
            merged[page_view.pathname].uniques += page_view.uniques
        else:
            merged[page_view.pathname] = PageView(page_view.uniques, page_view.pathname)
    ranked = sorted(merged.values(), key=lambda view: view.uniques, reverse=True)
    return ranked[:limit]
