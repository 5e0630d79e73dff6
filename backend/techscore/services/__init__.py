"""
TechScore Services

Service layer containing all business logic.
Each service has a defined interface (contract) and implementation.
"""

from techscore.services.base import BaseService, InsufficientDataError, ServiceError

__all__ = ["BaseService", "InsufficientDataError", "ServiceError"]
