"""
PerpSignal Services

Service layer containing the signal pipeline and its adapters.
Each service has a defined interface (contract) and implementation.
"""

from perpsignal.services.base import BaseService

__all__ = ["BaseService"]
