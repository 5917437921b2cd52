"""Cross-chain bridge route discovery and quoting engine."""

__version__ = "0.1.0"
