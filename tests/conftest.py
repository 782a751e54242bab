from __future__ import annotations

import os

# Settings are read at import time; point them at a throwaway database first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Callable

import pytest

from app.core.locks import KeyedLockRegistry
from app.db.init_db import init_db
from app.db.session import build_engine, build_session_factory
from app.models import Building, Floor, Room, Tenant, User
from app.models.base.enums import RoomType, TenantStatus, UserRole
from app.repositories.hostel import BuildingRepository, FloorRepository
from app.repositories.room import RoomAllocationRepository, RoomRepository
from app.schemas.hostel.building import BuildingCreate
from app.schemas.hostel.floor import FloorCreate
from app.schemas.room.room_base import RoomCreate
from app.services.hostel import BuildingService, FloorService, StructureCounterService
from app.services.room import AllocationService, RoomService


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'hostel.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def locks() -> KeyedLockRegistry:
    return KeyedLockRegistry()


# --- Services ------------------------------------------------------------------

@pytest.fixture
def allocation_service(db, locks) -> AllocationService:
    return AllocationService(RoomAllocationRepository(db), db, locks=locks)


@pytest.fixture
def room_service(db, locks) -> RoomService:
    return RoomService(RoomRepository(db), db, locks=locks)


@pytest.fixture
def building_service(db) -> BuildingService:
    return BuildingService(BuildingRepository(db), db)


@pytest.fixture
def floor_service(db) -> FloorService:
    return FloorService(FloorRepository(db), db)


@pytest.fixture
def counter_service(db, locks) -> StructureCounterService:
    return StructureCounterService(db, locks)


# --- Seed data -----------------------------------------------------------------

def _add(db, entity):
    db.add(entity)
    db.commit()
    return entity


@pytest.fixture
def make_tenant(db) -> Callable[..., Tenant]:
    def _make(name: str = "North Campus", status: TenantStatus = TenantStatus.ACTIVE) -> Tenant:
        return _add(db, Tenant(name=name, status=status))
    return _make


@pytest.fixture
def tenant(make_tenant) -> Tenant:
    return make_tenant()


@pytest.fixture
def make_student(db, tenant) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(name: str = None, tenant_id: str = None, role: UserRole = UserRole.STUDENT) -> User:
        counter["n"] += 1
        n = counter["n"]
        return _add(db, User(
            tenant_id=tenant_id or tenant.id,
            name=name or f"Student {n}",
            email=f"student{n}@example.edu",
            role=role,
        ))
    return _make


@pytest.fixture
def building(building_service, tenant) -> Building:
    result = building_service.create_building(
        tenant.id,
        BuildingCreate(building_name="Block A", building_code="BLK-A"),
    )
    return building_service.repository.find_by_id(result.unwrap().id)


@pytest.fixture
def floor(floor_service, tenant, building) -> Floor:
    result = floor_service.create_floor(tenant.id, FloorCreate(building_id=building.id, floor_number=1))
    return floor_service.repository.find_by_id(result.unwrap().id)


@pytest.fixture
def make_room(room_service, tenant, building, floor) -> Callable[..., Room]:
    def _make(room_number: str, capacity: int = 2, room_type: RoomType = RoomType.DOUBLE, floor_id: str = None) -> Room:
        result = room_service.create_room(
            tenant.id,
            building.id,
            RoomCreate(
                floor_id=floor_id or floor.id,
                room_number=room_number,
                room_type=room_type,
                capacity=capacity,
            ),
        )
        return room_service.repository.find_by_id(result.unwrap().id)
    return _make


def reload(db, entity):
    """Fresh copy of ``entity`` from the database."""
    db.expire_all()
    return db.get(type(entity), entity.id)
