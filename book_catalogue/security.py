"""
HTTP Basic authentication for the write endpoints.

The accepted credential pair comes from settings and is stored on
``app.state.credentials`` by the application factory; routes depend on
:data:`require_basic_auth`. A missing ``Authorization`` header raises
:class:`AuthRequired`, anything else that does not match raises
:class:`AuthInvalid`. Both answer 401 with a
``WWW-Authenticate: Basic realm="..."`` challenge.
"""

import base64
import binascii
import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param

from .errors import AuthInvalid, AuthRequired

DEFAULT_REALM = "Restricted Area"


@dataclass(frozen=True)
class BasicCredentials:
    """The single username/password pair allowed to write."""

    username: str
    password: str
    realm: str = DEFAULT_REALM

    def matches(self, username: str, password: str) -> bool:
        # Exact, case-sensitive comparison of both fields, in constant time
        user_ok = secrets.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        pass_ok = secrets.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        return user_ok and pass_ok


def decode_basic_header(authorization: str) -> Optional[HTTPBasicCredentials]:
    """Split ``Basic <base64(user:pass)>`` into its two fields.

    Returns ``None`` for another scheme, bad base64 or a payload without
    a colon. The password keeps any further colons.
    """
    scheme, param = get_authorization_scheme_param(authorization)
    if scheme.lower() != "basic" or not param:
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return HTTPBasicCredentials(username=username, password=password)


class BasicAuthGate(HTTPBasic):
    """``HTTPBasic`` dependency that checks against ``app.state.credentials``.

    Subclassing keeps the Basic security scheme in the OpenAPI document
    while the checks and error responses are our own.
    """

    def __init__(self) -> None:
        super().__init__(realm=DEFAULT_REALM, auto_error=False)

    async def __call__(self, request: Request) -> HTTPBasicCredentials:  # type: ignore[override]
        expected: BasicCredentials = request.app.state.credentials
        authorization = request.headers.get("Authorization")
        if not authorization:
            raise AuthRequired(expected.realm)

        credentials = decode_basic_header(authorization)
        if credentials is None or not expected.matches(
            credentials.username, credentials.password
        ):
            raise AuthInvalid(expected.realm)
        return credentials


require_basic_auth = BasicAuthGate()
