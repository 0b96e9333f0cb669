"""Credential reconciliation middleware.

Moves HTTP Basic credentials supplied as query parameters or as a cookie into
the Authorization header. Credentials given in the URL are first bounced into
a cookie with a 307 redirect so they don't linger in the address bar.

Whatever the outcome, the credential query parameters and the credential
cookie never reach the downstream app.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from authhack.config import AuthHackConfig, LogLevel
from authhack.cookies import build_set_cookie, pop_cookie
from authhack.credentials import (
    AUTHORIZATION_HEADER,
    EMPTY_CREDENTIAL,
    EncodedCredential,
    encode,
    normalize,
)
from authhack.query import RequestQueryWrapper

_AUTHORIZATION_KEY = AUTHORIZATION_HEADER.lower().encode("latin-1")


class CredentialRedirectResponse(Response):
    """307 that stores the credential in a cookie and reloads the same URI."""

    def __init__(
        self,
        location: str,
        set_cookie: str,
        on_write_error: Optional[Callable[[OSError], None]] = None,
    ):
        super().__init__(
            status_code=307,
            headers={"Location": location, "Set-Cookie": set_cookie},
        )
        self._on_write_error = on_write_error

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except OSError as exc:
            # The status line may already be out; nothing left to recover.
            if self._on_write_error is None:
                raise
            self._on_write_error(exc)


class AuthHackMiddleware(BaseHTTPMiddleware):
    """Reconcile Authorization header, query parameter and cookie credentials.

    Precedence: an existing Authorization header always wins. Otherwise a
    query credential that differs from the cookie triggers a redirect which
    sets the cookie, and a cookie credential is promoted into the header.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: Optional[AuthHackConfig] = None,
        name: str = "authhack",
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app)
        self._config = config if config is not None else AuthHackConfig()
        self._name = name
        self._logger = logger or logging.getLogger(__name__)

        self._log(LogLevel.INFO, "initializing")

    @property
    def config(self) -> AuthHackConfig:
        return self._config

    def _log(self, level: LogLevel, msg: str, *args) -> None:
        if level == LogLevel.NONE or level > self._config.log_level:
            return
        self._logger.log(level.logging_level, "AuthHack (%s): " + msg, self._name, *args)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        scope = request.scope
        self._log(LogLevel.DEBUG, "serving request '%s'", request.url)

        has_header = bool(request.headers.get(AUTHORIZATION_HEADER))

        # Scrub both carriers before deciding anything.
        query = RequestQueryWrapper(scope)
        query_credential = self._extract_query_credential(query)
        query.commit()
        cookie_credential = self._extract_cookie_credential(scope)

        if has_header:
            self._log(LogLevel.VERBOSE, "found authorization header, forwarding as-is")
            return await call_next(request)

        if query_credential and not self._config.cookie_name:
            self._log(LogLevel.VERBOSE, "cookie disabled, moving query credential to header")
            self._set_authorization(scope, query_credential)
            return await call_next(request)

        if query_credential and query_credential != cookie_credential:
            # Scrubbed URI: the follow-up request brings the credential in the cookie, not the URL.
            return self._redirect(query.request_uri, query_credential)

        if cookie_credential:
            self._log(LogLevel.VERBOSE, "moving cookie credential to header")
            self._set_authorization(scope, cookie_credential)
        else:
            self._log(LogLevel.DEBUG, "found no headers, params or cookie")

        return await call_next(request)

    def _extract_query_credential(self, query: RequestQueryWrapper) -> EncodedCredential:
        authorization_key = self._config.authorization_query_param
        username_key = self._config.username_query_param
        password_key = self._config.password_query_param

        from_authorization = EMPTY_CREDENTIAL
        if authorization_key:
            raw = query.get(authorization_key)
            if raw:
                candidate = normalize(raw)
                if candidate.is_well_formed():
                    from_authorization = candidate
                    self._log(
                        LogLevel.DEBUG,
                        "found authorization query param ('%s': '%s')",
                        authorization_key,
                        raw,
                    )
                else:
                    self._log(LogLevel.WARNING, "ignoring malformed '%s' query param", authorization_key)
            query.delete(authorization_key)

        from_username = EMPTY_CREDENTIAL
        if username_key:
            username = query.get(username_key)
            if username:
                # Password is optional
                password = query.get(password_key) if password_key else ""
                from_username = encode(username, password)
                self._log(
                    LogLevel.DEBUG,
                    "found username and password query params ('%s': '%s' / '%s': '%s')",
                    username_key,
                    username,
                    password_key,
                    password,
                )
            query.delete(username_key)
            if password_key:
                query.delete(password_key)

        if from_authorization and from_username and from_authorization != from_username:
            self._log(
                LogLevel.INFO,
                "authorization query param and username/password query params differ, "
                "using '%s'",
                authorization_key,
            )

        credential = from_authorization or from_username
        if credential:
            self._log_whose(credential, "query params")
        return credential

    def _extract_cookie_credential(self, scope: Scope) -> EncodedCredential:
        cookie_name = self._config.cookie_name
        if not cookie_name:
            return EMPTY_CREDENTIAL

        value = pop_cookie(scope, cookie_name)
        if not value:
            return EMPTY_CREDENTIAL

        self._log(LogLevel.DEBUG, "found cookie ('%s': '%s')", cookie_name, value)
        credential = EncodedCredential(value)
        self._log_whose(credential, "cookie")
        return credential

    def _log_whose(self, credential: EncodedCredential, source: str) -> None:
        creds = credential.decode()
        if creds is None:
            self._log(LogLevel.VERBOSE, "found undecodable credential in %s", source)
        else:
            self._log(LogLevel.VERBOSE, "found credential for '%s' in %s", creds.username, source)

    def _set_authorization(self, scope: Scope, credential: EncodedCredential) -> None:
        headers = [
            (key, value)
            for key, value in scope.get("headers") or []
            if key.lower() != _AUTHORIZATION_KEY
        ]
        headers.append((_AUTHORIZATION_KEY, credential.with_prefix().encode("latin-1")))
        scope["headers"] = headers

    def _redirect(self, location: str, credential: EncodedCredential) -> Response:
        self._log(
            LogLevel.VERBOSE,
            "query credential differs from cookie, redirecting to '%s' with cookie '%s'",
            location,
            self._config.cookie_name,
        )
        set_cookie = build_set_cookie(
            self._config.cookie_name,
            credential.value,
            domain=self._config.cookie_domain,
            path=self._config.cookie_path,
        )
        return CredentialRedirectResponse(location, set_cookie, on_write_error=self._on_write_error)

    def _on_write_error(self, exc: OSError) -> None:
        self._log(LogLevel.WARNING, "failed to write redirect response: %s", exc)
