"""clipenhancer — context-aware clipboard text enhancement."""

from clipenhancer.version import __version__

__all__ = ["__version__"]
