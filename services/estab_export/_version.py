"""Version management using package metadata."""

import importlib.metadata

try:
    __version__ = importlib.metadata.version("estab")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0.dev0"
