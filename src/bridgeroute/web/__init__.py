"""Web boundary layer for the bridge engine.

Everything here is read-only: it reports chains, tokens, route availability
and quotes, and hands back unsigned transaction steps for the wallet to
sign client-side. Nothing in this package signs or broadcasts.
"""

__all__ = [
    "contracts",
    "services",
    "controllers",
]
