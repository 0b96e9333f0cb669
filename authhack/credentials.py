"""HTTP Basic credential encoding.

Credentials travel between carriers (header, query parameter, cookie) as the
base64 form of ``username:password``. They are always kept in canonical form,
without the ``Basic `` scheme prefix, and only get the prefix back when they
are written into the Authorization header.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

AUTHORIZATION_HEADER = "Authorization"
BASIC_PREFIX = "Basic "


@dataclass(frozen=True)
class BasicAuthCredentials:
    username: str
    password: str


@dataclass(frozen=True)
class EncodedCredential:
    """Base64 encoded ``username:password`` without the scheme prefix."""

    value: str = ""

    def __str__(self) -> str:
        return self.value

    def __bool__(self) -> bool:
        return not self.is_empty()

    def is_empty(self) -> bool:
        return self.value == ""

    def with_prefix(self) -> str:
        return with_prefix(self)

    def is_well_formed(self) -> bool:
        """True when the value is strict, padded base64 and nothing else."""
        if self.is_empty():
            return False

        try:
            base64.b64decode(self.value, validate=True)
        except ValueError:
            # binascii.Error, or non-ASCII input
            return False
        return True

    def decode(self) -> BasicAuthCredentials | None:
        """Decode the payload back into username and password.

        Returns None when the value isn't valid base64/UTF-8 or has no colon.
        Nothing is verified here; this only exists so the filter can say whose
        credentials it is moving around.
        """
        if self.is_empty():
            return None

        try:
            decoded = base64.b64decode(self.value, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None

        username, sep, password = decoded.partition(":")
        if sep != ":":
            return None

        return BasicAuthCredentials(username=username, password=password)


EMPTY_CREDENTIAL = EncodedCredential()


def encode(username: str, password: str | None = None) -> EncodedCredential:
    """Encode a username/password pair. A missing password is an empty one."""
    raw = f"{username}:{password or ''}".encode("utf-8")
    return EncodedCredential(base64.b64encode(raw).decode("ascii"))


def normalize(raw: str | None) -> EncodedCredential:
    """Strip every leading ``Basic `` prefix (clients sometimes double it)."""
    value = raw or ""
    while value.startswith(BASIC_PREFIX):
        value = value[len(BASIC_PREFIX):]
    return EncodedCredential(value)


def with_prefix(credential: EncodedCredential) -> str:
    return BASIC_PREFIX + credential.value
