from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .settings import Settings, get_settings

_security = HTTPBasic(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Basic"},
    )


# PUBLIC_INTERFACE
def get_basic_auth_dependency(settings: Optional[Settings] = None):
    """
    Return a FastAPI dependency guarding the todo routes with HTTP Basic Auth.

    When ENABLE_BASIC_AUTH is off the dependency is a no-op. When on, missing
    or wrong credentials get a 401 with `WWW-Authenticate: Basic`, and so does
    every request if the server has no username/password configured.
    """
    settings = settings or get_settings()

    if not settings.enable_basic_auth:
        async def _noop() -> None:  # noqa: D401 - trivial
            """No-op dependency (auth disabled)."""
            return None

        return _noop

    expected_user = settings.basic_auth_username
    expected_pass = settings.basic_auth_password

    async def _enforce(creds: Optional[HTTPBasicCredentials] = Depends(_security)) -> None:
        if creds is None:
            raise _unauthorized("Not authenticated")
        if expected_user is None or expected_pass is None:
            raise _unauthorized("Server authentication not configured")

        user_ok = secrets.compare_digest(creds.username.encode(), expected_user.encode())
        pass_ok = secrets.compare_digest(creds.password.encode(), expected_pass.encode())
        if not (user_ok and pass_ok):
            raise _unauthorized("Invalid authentication credentials")

    return _enforce
