"""Public interface for the millpane column browser."""

from .browser import ColumnBrowser, MillpaneError

__version__ = "0.1.0"
__all__ = ["ColumnBrowser", "MillpaneError", "__version__"]
