# summary_gateway/api/endpoints/__init__.py
"""API endpoints"""

from . import search, health

__all__ = ["search", "health"]
