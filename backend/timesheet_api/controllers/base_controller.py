"""
Base controller class.
Controllers coordinate services and return their result envelopes.
"""

from abc import ABC


class BaseController(ABC):
    """Base controller class for all controllers."""
    pass
