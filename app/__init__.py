"""Hypermedia catalog service and its link-building helpers."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("resource-links")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"
