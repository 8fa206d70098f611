"""stackwalk package root."""

from stackwalk.exceptions import NeverRaise, NeverThrown
from stackwalk.invariants import never

__all__ = ["__version__", "NeverRaise", "NeverThrown", "never"]

__version__ = "0.1.0"
