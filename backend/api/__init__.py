"""API route handlers."""
from . import prices

__all__ = ["prices"]
