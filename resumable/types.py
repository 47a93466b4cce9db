from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

from typing_extensions import Doc  # noqa

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]

Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]

ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]
