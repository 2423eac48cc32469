"""Set-associative cache model with pluggable replacement and write policies."""

from cachemodel.cache import *  # noqa: F401,F403

__version__ = "0.1"
