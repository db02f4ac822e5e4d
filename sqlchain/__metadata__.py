"""Metadata for the Project."""

from importlib.metadata import PackageNotFoundError, metadata, version

__all__ = ("__project__", "__version__")

try:
    __version__ = version("sqlchain")
    __project__ = metadata("sqlchain")["Name"]
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
    __project__ = "sqlchain"
finally:
    del version, PackageNotFoundError, metadata
