# app/api/v1/allocations.py
"""
Room allocation endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api import deps
from app.models.base.enums import AllocationStatus
from app.schemas.room.allocation import (
    AllocationCheckRequest,
    AllocationCreate,
    AllocationUpdate,
    BulkAllocationRequest,
)
from app.services.room import AllocationService

router = APIRouter(prefix="/allocations", tags=["allocations"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Allocate a student to a room")
def create_allocation(
    payload: AllocationCreate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    result = service.create_allocation(tenant_id, payload)
    return deps.respond(result, status.HTTP_201_CREATED)


@router.post("/bulk", status_code=status.HTTP_201_CREATED, summary="Allocate many students")
def bulk_allocate(
    payload: BulkAllocationRequest,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    result = service.bulk_allocate(tenant_id, payload)
    return deps.respond(result, status.HTTP_201_CREATED)


@router.post("/check", summary="Check whether an allocation would succeed")
def check_allocation(
    payload: AllocationCheckRequest,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    return deps.respond(service.check_allocation_conflicts(tenant_id, payload))


@router.get("", summary="List allocations")
def list_allocations(
    status_filter: Optional[AllocationStatus] = Query(None, alias="status"),
    room_id: Optional[str] = Query(None, alias="roomId"),
    student_id: Optional[str] = Query(None, alias="studentId"),
    page: deps.Pagination = Depends(deps.get_pagination),
    tenant_id: str = Depends(deps.get_tenant_context),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    result = service.list_allocations(
        tenant_id,
        status=status_filter,
        room_id=room_id,
        student_id=student_id,
        skip=page.skip,
        take=page.take,
    )
    return deps.respond(result)


@router.get("/student/{student_id}/history", summary="Allocation history of a student")
def student_history(
    student_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    return deps.respond(service.get_student_allocation_history(tenant_id, student_id))


@router.get("/{allocation_id}", summary="Get an allocation")
def get_allocation(
    allocation_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    return deps.respond(service.get_allocation(tenant_id, allocation_id))


@router.put("/{allocation_id}", summary="Move, check out or annotate an allocation")
def update_allocation(
    allocation_id: str,
    payload: AllocationUpdate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    return deps.respond(service.update_allocation(tenant_id, allocation_id, payload))


@router.delete("/{allocation_id}", summary="Check a student out")
def deallocate(
    allocation_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    return deps.respond(service.deallocate_student(tenant_id, allocation_id))
