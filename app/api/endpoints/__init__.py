"""API endpoints package."""

from . import health
from . import proposals
from . import rfp
from . import drive

__all__ = ["health", "proposals", "rfp", "drive"]
