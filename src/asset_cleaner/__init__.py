"""Flutter Asset Cleaner - find and remove assets your code never references."""
from .config import __version__

__all__ = ["__version__"]
