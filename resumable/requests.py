from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from resumable.datastructures import Header
from resumable.enums import ScopeType
from resumable.types import Receive, Scope


class Request(Mapping[str, Any]):
    """
    Read only view over an HTTP scope.
    """

    def __init__(self, scope: Scope, receive: Receive | None = None) -> None:
        assert scope["type"] == ScopeType.HTTP
        self.scope = scope
        self._receive = receive
        self._headers: Header | None = None

    def __getitem__(self, __key: str) -> Any:
        return self.scope[__key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.scope)

    def __len__(self) -> int:
        return len(self.scope)

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    @property
    def method(self) -> str:
        return str(self.scope.get("method", "GET")).upper()

    @property
    def path(self) -> str:
        return self.scope.get("path", "/")

    @property
    def headers(self) -> Header:
        if self._headers is None:
            self._headers = Header(self.scope.get("headers", ()))
        return self._headers

    def header(self, name: str) -> str | None:
        """
        Returns the first value of the header `name`, `None` when the client did not send it.
        """
        return self.headers.get(name)
