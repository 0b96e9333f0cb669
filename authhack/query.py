"""Batched access to a request's query string.

Every extraction step deletes parameters; re-encoding the query string after
each of them would rewrite the URL several times with partially applied
state. The wrapper collects reads and deletes on a cached copy and writes the
result back to the ASGI scope once, in ``commit()``.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from starlette.datastructures import QueryParams
from starlette.types import Scope


def _request_uri(scope: Scope) -> str:
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = scope.get("path", "/")
    query_string = scope.get("query_string", b"").decode("latin-1")
    if query_string:
        return f"{path}?{query_string}"
    return path


class RequestQueryWrapper:
    """Lazy, write-once view over ``scope["query_string"]``."""

    def __init__(self, scope: Scope):
        self.scope = scope
        self.request_uri = _request_uri(scope)
        self._items: Optional[List[Tuple[str, str]]] = None
        self._dirty = False

    @property
    def dirty(self) -> bool:
        return self._dirty

    def _query(self) -> List[Tuple[str, str]]:
        if self._items is None:
            self._items = QueryParams(self.scope.get("query_string", b"")).multi_items()
        return self._items

    def get(self, key: str) -> str:
        """First value for ``key``, or an empty string."""
        for name, value in self._query():
            if name == key:
                return value
        return ""

    def delete(self, key: str) -> None:
        kept = [(name, value) for name, value in self._query() if name != key]
        if len(kept) != len(self._query()):
            self._items = kept
            self._dirty = True

    def commit(self) -> Scope:
        """Write pending changes back into the scope; no-op when nothing changed."""
        if self._dirty:
            encoded = str(QueryParams(self._query()))
            self.scope["query_string"] = encoded.encode("latin-1")
            self.request_uri = _request_uri(self.scope)

            self._items = None
            self._dirty = False

        return self.scope
