"""
sfrest.catalog - sObject metadata catalog
=========================================

The global describe (``/services/data/<version>/sobjects/``) is fetched once
after login and kept read-only. Type-scoped operations resolve their URLs here
before any request goes out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .exceptions import ApiError, UnknownTypeError
from .executor import RequestExecutor, json_body

_logger = logging.getLogger(__name__)

SOBJECT_RELATION = "sobject"


@dataclass(frozen=True)
class ObjectMetadata:
    """
    One entry of the global describe.

    Attributes
    ----------
    name : str
        API name of the type, e.g. "Account"
    urls : mapping
        Relation name -> instance-relative URL ("sobject", "describe", ...)
    raw : dict
        The full describe entry as returned by the API
    """

    name: str
    urls: Mapping[str, str]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, entry: Dict[str, Any]) -> ObjectMetadata:
        urls = entry.get("urls") or {}
        return cls(
            name=entry["name"],
            urls=MappingProxyType(dict(urls)),
            raw=entry,
        )

    @property
    def queryable(self) -> bool:
        return bool(self.raw.get("queryable"))


class Catalog:
    """Immutable mapping of type name -> :class:`ObjectMetadata`."""

    def __init__(self, objects: Mapping[str, ObjectMetadata]) -> None:
        self._objects: Mapping[str, ObjectMetadata] = MappingProxyType(dict(objects))

    @classmethod
    def describe(cls, executor: RequestExecutor, data_path: str) -> Catalog:
        """Fetch the global describe under ``data_path`` and build the catalog."""
        path = f"{data_path}/sobjects/"
        result = executor.execute("GET", path, expected=200)
        payload = json_body(result)

        sobjects = payload.get("sobjects") if isinstance(payload, dict) else None
        if not isinstance(sobjects, list):
            raise ApiError(result.status_code, result.text, path)

        catalog = cls(
            {
                entry["name"]: ObjectMetadata.from_response(entry)
                for entry in sobjects
                if isinstance(entry, dict) and entry.get("name")
            }
        )
        _logger.info("Catalog loaded: %d object types", len(catalog))
        return catalog

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, name: object) -> bool:
        return name in self._objects

    def __iter__(self) -> Iterator[str]:
        return iter(self._objects)

    def get(self, name: str) -> Optional[ObjectMetadata]:
        return self._objects.get(name)

    def metadata(self, name: str) -> ObjectMetadata:
        meta = self._objects.get(name)
        if meta is None:
            raise UnknownTypeError(name)
        return meta

    def names(self) -> List[str]:
        return sorted(self._objects)

    def queryable_names(self) -> List[str]:
        return sorted(n for n, m in self._objects.items() if m.queryable)

    def resolve_url(self, type_name: str, relation: str = SOBJECT_RELATION) -> str:
        """Instance-relative URL of ``relation`` for ``type_name``."""
        url = self.metadata(type_name).urls.get(relation)
        if not url:
            raise UnknownTypeError(type_name, relation)
        return url.rstrip("/")
