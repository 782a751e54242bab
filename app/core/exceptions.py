"""
Custom Exceptions for the Hostel Allocation Service

This module defines custom exception classes used throughout the application
for better error handling and debugging.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Tenancy
    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"
    TENANT_SUSPENDED = "TENANT_SUSPENDED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Business logic errors
    CONFLICT = "CONFLICT"
    STUDENT_ALREADY_ALLOCATED = "STUDENT_ALREADY_ALLOCATED"
    ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
    ROOM_AT_CAPACITY = "ROOM_AT_CAPACITY"
    INVALID_STATE = "INVALID_STATE"

    # Entity specific not-found errors
    STUDENT_NOT_FOUND = "STUDENT_NOT_FOUND"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    FLOOR_NOT_FOUND = "FLOOR_NOT_FOUND"
    BUILDING_NOT_FOUND = "BUILDING_NOT_FOUND"
    ALLOCATION_NOT_FOUND = "ALLOCATION_NOT_FOUND"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 400
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, error_code, details, 404)


# ========================================
# Resource Not Found Exceptions
# ========================================

class TenantNotFoundError(ResourceNotFoundError):
    """Exception raised when the tenant context cannot be resolved"""

    def __init__(self, tenant_id: Optional[str] = None):
        super().__init__("Tenant", tenant_id, error_code=ErrorCode.TENANT_NOT_FOUND)


class StudentNotFoundError(ResourceNotFoundError):
    """Exception raised when a student is not found"""

    def __init__(self, student_id: Optional[str] = None):
        super().__init__("Student", student_id, error_code=ErrorCode.STUDENT_NOT_FOUND)


class RoomNotFoundError(ResourceNotFoundError):
    """Exception raised when a room is not found"""

    def __init__(self, room_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__("Room", room_id, message, error_code=ErrorCode.ROOM_NOT_FOUND)


class FloorNotFoundError(ResourceNotFoundError):
    """Exception raised when a floor is not found"""

    def __init__(self, floor_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__("Floor", floor_id, message, error_code=ErrorCode.FLOOR_NOT_FOUND)


class BuildingNotFoundError(ResourceNotFoundError):
    """Exception raised when a building is not found"""

    def __init__(self, building_id: Optional[str] = None):
        super().__init__("Building", building_id, error_code=ErrorCode.BUILDING_NOT_FOUND)


class AllocationNotFoundError(ResourceNotFoundError):
    """Exception raised when a room allocation is not found"""

    def __init__(self, allocation_id: Optional[str] = None):
        super().__init__("Allocation", allocation_id, error_code=ErrorCode.ALLOCATION_NOT_FOUND)


# ========================================
# Tenancy Exceptions
# ========================================

class TenantSuspendedError(BaseAppException):
    """Exception raised when the tenant account is suspended"""

    def __init__(self, tenant_id: Optional[str] = None):
        super().__init__(
            "Tenant account is suspended",
            ErrorCode.TENANT_SUSPENDED,
            {"tenant_id": tenant_id},
            403
        )


# ========================================
# Business Logic Exceptions
# ========================================

class ConflictError(BaseAppException):
    """Base class for business-rule violations"""

    def __init__(
        self,
        message: str = "Operation conflicts with current state",
        error_code: ErrorCode = ErrorCode.CONFLICT,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400
    ):
        super().__init__(message, error_code, details, status_code)


class StudentAlreadyAllocatedError(ConflictError):
    """Exception raised when a student already holds an active allocation"""

    def __init__(
        self,
        student_id: Optional[str] = None,
        allocation_id: Optional[str] = None
    ):
        super().__init__(
            "Student already has an active room allocation. Please deallocate first.",
            ErrorCode.STUDENT_ALREADY_ALLOCATED,
            {"student_id": student_id, "allocation_id": allocation_id}
        )


class RoomUnavailableError(ConflictError):
    """Exception raised when a room is not open for allocation"""

    def __init__(
        self,
        room_number: Optional[str] = None,
        room_id: Optional[str] = None,
        reason: Optional[str] = None
    ):
        message = f"Room {room_number} is unavailable"
        if reason:
            message += f" ({reason})"
        message += " and cannot be allocated"
        super().__init__(
            message,
            ErrorCode.ROOM_UNAVAILABLE,
            {"room_id": room_id, "reason": reason}
        )


class RoomCapacityExceededError(ConflictError):
    """Exception raised when a room has no free places left"""

    def __init__(
        self,
        room_number: Optional[str] = None,
        room_id: Optional[str] = None,
        occupied: Optional[int] = None,
        capacity: Optional[int] = None
    ):
        super().__init__(
            f"Room {room_number} is at full capacity ({occupied}/{capacity}). "
            f"Cannot allocate more students.",
            ErrorCode.ROOM_AT_CAPACITY,
            {"room_id": room_id, "occupied": occupied, "capacity": capacity}
        )


class InvalidStateError(ConflictError):
    """Exception raised when an entity is not in a state that allows the operation"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INVALID_STATE, details)


class DuplicateEntryError(ConflictError):
    """Exception raised when a unique business key is already taken"""

    def __init__(
        self,
        message: str = "Duplicate entry",
        field: Optional[str] = None,
        value: Optional[Any] = None
    ):
        super().__init__(
            message,
            ErrorCode.DUPLICATE_ENTRY,
            {"field": field, "value": value}
        )


# ========================================
# Database Exceptions
# ========================================

class DatabaseError(BaseAppException):
    """Exception raised for database operation errors"""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None
    ):
        details = {"operation": operation} if operation else {}
        super().__init__(message, ErrorCode.DATABASE_ERROR, details, 500)


__all__ = [
    # Enums
    'ErrorCode',

    # Base exceptions
    'BaseAppException',

    # General exceptions
    'ValidationError',
    'ResourceNotFoundError',

    # Resource Not Found exceptions
    'TenantNotFoundError',
    'StudentNotFoundError',
    'RoomNotFoundError',
    'FloorNotFoundError',
    'BuildingNotFoundError',
    'AllocationNotFoundError',

    # Tenancy exceptions
    'TenantSuspendedError',

    # Business logic exceptions
    'ConflictError',
    'StudentAlreadyAllocatedError',
    'RoomUnavailableError',
    'RoomCapacityExceededError',
    'InvalidStateError',
    'DuplicateEntryError',

    # Database exceptions
    'DatabaseError',
]
