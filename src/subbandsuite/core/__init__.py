"""Core definitions for subbandsuite."""

# Import modules themselves (allows: from subbandsuite.core import constants)
from . import constants

__all__ = [
    "constants",
]
