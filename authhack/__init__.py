"""Move HTTP Basic credentials from query parameters and cookies into the Authorization header"""

from authhack.config import AuthHackConfig, LogLevel
from authhack.credentials import EncodedCredential, encode, normalize, with_prefix
from authhack.middleware import AuthHackMiddleware

__all__ = [
    "AuthHackConfig",
    "AuthHackMiddleware",
    "EncodedCredential",
    "LogLevel",
    "encode",
    "normalize",
    "with_prefix",
]
