"""
Base service class.
Services contain business logic, coordinate repositories and report
business-rule failures through ``ServiceResult`` envelopes.
"""

from abc import ABC


class BaseService(ABC):
    """Base service class for all services."""
    pass
