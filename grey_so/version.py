"""Version information for grey-so."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("grey-so")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"
