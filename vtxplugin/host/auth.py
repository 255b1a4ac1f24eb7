"""Header lookup, credential extraction and identity building."""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Callable, Sequence
from typing import Any

from loguru import logger

from vtxplugin.core.errors import AuthDenied, VtxError, as_vtx_error
from vtxplugin.core.types import Err, Ok, Result, UserContext, find_header

_BEARER_PREFIX = "bearer "
_BASIC_PREFIX = "basic "


class AuthRequest:
    """Read-only view over a request's header list."""

    def __init__(self, headers: Sequence[tuple[str, str]]):
        self.headers = headers

    def header(self, name: str) -> str | None:
        """Case-insensitive lookup; the first matching header wins."""
        return find_header(self.headers, name)

    def require_header(self, name: str) -> str:
        value = self.header(name)
        if value is None:
            # Which header was missing is lost once this becomes a bare 401.
            logger.debug("required header missing: {}", name)
            raise AuthDenied(401)
        return value

    def _credential(self, prefix: str) -> str | None:
        value = self.header("Authorization")
        if value is None:
            return None
        if value[: len(prefix)].lower() != prefix:
            return None
        return value[len(prefix):]

    def bearer_token(self) -> str | None:
        """Token from `Authorization: Bearer <token>`; the scheme is case-insensitive."""
        return self._credential(_BEARER_PREFIX)

    def require_bearer_token(self) -> str:
        token = self.bearer_token()
        if token is None:
            raise AuthDenied(401)
        return token

    def basic_auth(self) -> str | None:
        """Raw base64 payload from `Authorization: Basic <payload>`."""
        return self._credential(_BASIC_PREFIX)

    def basic_credentials(self) -> tuple[str, str] | None:
        """Decoded `(user, password)` pair, or None when absent or malformed."""
        raw = self.basic_auth()
        if raw is None:
            return None
        try:
            decoded = base64.b64decode(raw, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None
        user, sep, password = decoded.partition(":")
        if not sep:
            return None
        return user, password


class UserBuilder:
    """Fluent builder for `UserContext`."""

    def __init__(self, user_id: str, username: str):
        self.user_id = user_id
        self.username = username
        self.groups: list[str] = []
        self.metadata: dict[str, Any] = {}
        self.dropped_keys: list[str] = []

    def group(self, name: str) -> UserBuilder:
        self.groups.append(name)
        return self

    def meta(self, key: str, value: Any) -> UserBuilder:
        """Attach a metadata field. Values that cannot be serialized are skipped.

        NaN and infinities count as unserializable here, so such a key is
        dropped instead of being written as `null`.
        """
        try:
            encoded = json.dumps(value, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError, RecursionError) as exc:
            self.dropped_keys.append(key)
            logger.debug("dropping unserializable metadata key {}: {}", key, exc)
            return self
        self.metadata[key] = json.loads(encoded)
        return self

    def build(self) -> UserContext:
        try:
            metadata = json.dumps(self.metadata, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError, RecursionError):
            metadata = "{}"
        return UserContext(
            user_id=self.user_id,
            username=self.username,
            groups=list(self.groups),
            metadata=metadata,
        )


def auth_status_code(err: VtxError) -> int:
    """Collapse an error into the bare status authenticate reports."""
    if isinstance(err, AuthDenied):
        return err.code
    if err.status_code in (403, 404):
        return err.status_code
    return 500


def into_auth_result(fn: Callable[[], UserContext]) -> Result[UserContext, int]:
    """Run an authenticate implementation and lower its outcome to `Ok`/`Err(status)`."""
    try:
        return Ok(fn())
    except Exception as exc:
        err = as_vtx_error(exc)
        if not isinstance(exc, VtxError):
            logger.exception("authenticate failed: {}", err.message)
        return Err(auth_status_code(err))
