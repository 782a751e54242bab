"""
Pagination utilities for list endpoints
"""

import math
from dataclasses import dataclass


@dataclass
class PaginationParams:
    """Offset pagination parameters (``skip``/``take``)"""
    skip: int = 0
    take: int = 10
    max_take: int = 100

    def __post_init__(self):
        # Clamp into range instead of rejecting
        self.skip = max(0, self.skip)
        self.take = min(max(1, self.take), self.max_take)


@dataclass
class PaginationInfo:
    """Pagination information"""
    skip: int
    take: int
    total: int

    @property
    def page(self) -> int:
        return self.skip // self.take + 1 if self.take else 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.take) if self.take > 0 else 0
