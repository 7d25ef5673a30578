from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Set, Union
from urllib.parse import urlencode

from .catalog import Catalog
from .exceptions import ApiError, PaginationError, TimestampError
from .executor import RequestExecutor, json_body

_logger = logging.getLogger(__name__)

Timestamp = Union[datetime, int, float]

_TIMESTAMP_FMT = "%Y-%m-%dT%H:%M:%S"


def format_timestamp(value: Timestamp) -> str:
    """
    Render ``value`` as ``yyyy-MM-ddTHH:mm:ss+00:00`` in UTC.

    Naive datetimes are taken as UTC. Numbers are epoch SECONDS (as returned
    by ``time.time()``), not milliseconds; a value outside the datetime range
    raises :class:`TimestampError`.
    """
    try:
        if isinstance(value, datetime):
            dt = value if value.tzinfo is None else value.astimezone(timezone.utc)
        else:
            dt = datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampError(value, str(e)) from e
    return dt.strftime(_TIMESTAMP_FMT) + "+00:00"


def window_params(start: Timestamp, end: Timestamp) -> str:
    return urlencode({"start": format_timestamp(start), "end": format_timestamp(end)})


@dataclass
class QueryPage:
    """One page of a SOQL query result."""

    records: List[Dict[str, Any]] = field(default_factory=list)
    next_records_url: Optional[str] = None
    total_size: Optional[int] = None
    done: bool = True

    @classmethod
    def from_response(cls, data: Any) -> QueryPage:
        if not isinstance(data, dict):
            raise ApiError(200, f"Unexpected query response: {data!r}"[:500])
        return cls(
            records=list(data.get("records") or []),
            next_records_url=data.get("nextRecordsUrl") or None,
            total_size=data.get("totalSize"),
            done=bool(data.get("done", not data.get("nextRecordsUrl"))),
        )


class QueryPaginator:
    """Runs SOQL queries and the updated/deleted change feeds."""

    def __init__(
        self,
        executor: RequestExecutor,
        catalog: Catalog,
        data_path: str,
        *,
        max_pages: int = 10000,
    ) -> None:
        self.executor = executor
        self.catalog = catalog
        self.data_path = data_path
        self.max_pages = max_pages

    def query_path(self, soql: str) -> str:
        return f"{self.data_path}/query/?" + urlencode({"q": soql})

    def _fetch_page(self, path: str) -> QueryPage:
        result = self.executor.execute("GET", path, expected=200)
        return QueryPage.from_response(json_body(result))

    # ---------------- query ----------------

    def iter_pages(self, soql: str) -> Iterator[QueryPage]:
        """Yield pages, following ``nextRecordsUrl`` verbatim until it is absent."""
        path: Optional[str] = self.query_path(soql)
        seen: Set[str] = set()
        pages = 0

        while path:
            if pages >= self.max_pages:
                raise PaginationError(-1, f"Query exceeded {self.max_pages} pages", path)
            page = self._fetch_page(path)
            pages += 1
            if pages == 1 and page.total_size is not None:
                _logger.info("Query matched %s records", page.total_size)
            yield page

            seen.add(path)
            path = page.next_records_url
            if path in seen:
                raise PaginationError(-1, f"Continuation repeats {path}", path)

    def iter_records(self, soql: str) -> Iterator[Dict[str, Any]]:
        for page in self.iter_pages(soql):
            yield from page.records

    def query(self, soql: str) -> List[Dict[str, Any]]:
        """Return every record of ``soql`` across all pages, in page order."""
        return list(self.iter_records(soql))

    # ---------------- change feeds ----------------

    def _window(self, type_name: str, feed: str, start: Timestamp, end: Timestamp) -> Dict[str, Any]:
        base = self.catalog.resolve_url(type_name)
        path = f"{base}/{feed}?{window_params(start, end)}"
        payload = json_body(self.executor.execute("GET", path, expected=200))
        if not isinstance(payload, dict):
            raise ApiError(200, f"Unexpected {feed} response: {payload!r}"[:500], path)
        return payload

    def get_updated(self, type_name: str, start: Timestamp, end: Timestamp) -> List[str]:
        """Ids of ``type_name`` records updated between ``start`` and ``end``."""
        return list(self._window(type_name, "updated", start, end).get("ids") or [])

    def get_deleted(
        self, type_name: str, start: Timestamp, end: Timestamp
    ) -> List[Dict[str, str]]:
        """``deletedRecords`` entries (id + deletedDate) in the window."""
        return list(self._window(type_name, "deleted", start, end).get("deletedRecords") or [])
