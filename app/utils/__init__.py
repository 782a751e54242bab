"""
Utility package initialization and exports
"""

from .datetime_utils import DateTimeHelper, utcnow
from .pagination_utils import PaginationInfo, PaginationParams

__all__ = [
    'DateTimeHelper',
    'utcnow',
    'PaginationInfo',
    'PaginationParams',
]
