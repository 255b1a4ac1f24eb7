"""Access to the user the host authenticated for the running request."""

from __future__ import annotations

from vtxplugin.core.types import CurrentUser

from .binding import current_host


def current_user() -> CurrentUser | None:
    return current_host().get_current_user()


def is_in_group(user: CurrentUser | None, group: str) -> bool:
    if user is None:
        return False
    return user.is_in_group(group)
