"""Directory adapter layer - abstracts over representative lookup providers."""

from mp_lookup.adapters.directory.base import AbstractDirectoryClient
from mp_lookup.adapters.directory.factory import create_directory_client
from mp_lookup.adapters.directory.represent_client import RepresentClient

__all__ = [
    "AbstractDirectoryClient",
    "RepresentClient",
    "create_directory_client",
]
