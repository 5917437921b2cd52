"""Error taxonomy for route discovery and quoting.

None of these are meant to reach the presentation layer: discovery and
quoting catch ``BridgeError`` and degrade to an empty or negative result.
``RegistryConfigError`` is the exception, it is raised at import time when
the static chain table is unusable.
"""

from typing import Optional


class BridgeError(Exception):
    """Base class for aggregator and routing errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ValidationError(BridgeError):
    """Malformed or missing parameters (HTTP 400 or rejected locally)."""


class UnsupportedRouteError(BridgeError):
    """Route confirmed absent by the aggregator (HTTP 422). Cacheable."""


class TransientNetworkError(BridgeError):
    """Timeout, transport failure or server error. Never cached, safe to retry."""


class ProviderDataError(BridgeError):
    """Response body did not have the expected shape. Handled like a transient error."""


class RegistryConfigError(RuntimeError):
    """Static chain/token configuration is missing or inconsistent."""
