"""
Base services module.

Provides the foundational service layer components: the base service
class, result handling via ServiceResult, and transaction management.
"""

from app.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)
from app.services.base.transaction_manager import TransactionManager, TransactionContext
from app.services.base.base_service import BaseService

__all__ = [
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    "ErrorSeverity",
    "TransactionManager",
    "TransactionContext",
    "BaseService",
]
