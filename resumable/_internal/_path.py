from __future__ import annotations

from typing import cast

from resumable.types import Scope


def get_route_path(scope: Scope) -> str:
    """
    The path of the request relative to the mount point of the application.
    """
    root_path = scope.get("root_path", "")
    return cast(
        str,
        (
            scope["path"][len(root_path) :]
            if root_path and scope["path"].startswith(root_path)
            else scope["path"]
        ),
    )
