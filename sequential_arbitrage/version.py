"""Version information for the sequential arbitrage analyzer."""

__version__ = "0.3.0"
__version_info__ = tuple(int(i) for i in __version__.split("."))

VERSION_MAJOR = __version_info__[0]
VERSION_MINOR = __version_info__[1]
VERSION_PATCH = __version_info__[2]


def get_version() -> str:
    """Get the current version string."""
    return __version__
