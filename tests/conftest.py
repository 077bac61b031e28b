"""
Shared fixtures: an in-memory SQLite database per test, one tenant with a
session, a batch, students and fee components, and the fee services.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import uuid
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models.academics import AcademicSession, Batch, Student
from app.models.base import FeeComponentType, StudentStatus
from app.models.fee_structure import FeeComponent
from app.schemas.common.tenant import TenantScope
from app.services.fee_structure import (
    BatchFeeStructureService,
    FeeComponentService,
    RecalculationService,
    ScholarshipAssignmentService,
    ScholarshipService,
    StudentFeeStructureService,
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def scope():
    return TenantScope(org_id=uuid.uuid4(), branch_id=uuid.uuid4())


@pytest.fixture
def foreign_scope():
    return TenantScope(org_id=uuid.uuid4(), branch_id=uuid.uuid4())


@pytest.fixture
def admin_id():
    return uuid.uuid4()


@pytest.fixture
def academic_session(db, scope):
    academic_session = AcademicSession(org_id=scope.org_id, name="2025-26", is_current=True)
    db.add(academic_session)
    db.commit()
    return academic_session


@pytest.fixture
def batch(db, scope):
    batch = Batch(org_id=scope.org_id, branch_id=scope.branch_id, name="Class 10 A")
    db.add(batch)
    db.commit()
    return batch


def _add_student(db, scope, batch, first_name, status=StudentStatus.ACTIVE):
    student = Student(
        org_id=scope.org_id,
        branch_id=scope.branch_id,
        batch_id=batch.id if batch is not None else None,
        first_name=first_name,
        last_name="Sharma",
        status=status,
    )
    db.add(student)
    db.commit()
    return student


@pytest.fixture
def student(db, scope, batch):
    return _add_student(db, scope, batch, "Asha")


@pytest.fixture
def classmate(db, scope, batch):
    return _add_student(db, scope, batch, "Ravi")


@pytest.fixture
def withdrawn_student(db, scope, batch):
    return _add_student(db, scope, batch, "Zoya", status=StudentStatus.WITHDRAWN)


@pytest.fixture
def components(db, scope):
    """Active tuition, transport and lab components keyed by short name."""
    rows = {
        "tuition": FeeComponent(org_id=scope.org_id, name="Tuition Fee", type=FeeComponentType.TUITION),
        "transport": FeeComponent(org_id=scope.org_id, name="Bus Fee", type=FeeComponentType.TRANSPORT),
        "lab": FeeComponent(org_id=scope.org_id, name="Science Lab", type=FeeComponentType.LAB),
    }
    db.add_all(rows.values())
    db.commit()
    return rows


@pytest.fixture
def services(db):
    recalculation = RecalculationService(db)
    structures = StudentFeeStructureService(db, recalculation_service=recalculation)
    return SimpleNamespace(
        recalculation=recalculation,
        structures=structures,
        assignments=ScholarshipAssignmentService(db, recalculation_service=recalculation),
        scholarships=ScholarshipService(db, recalculation_service=recalculation),
        components=FeeComponentService(db),
        templates=BatchFeeStructureService(db, structure_service=structures),
    )


@pytest.fixture
def make_structure(services, scope, academic_session, components):
    """Create a structure of tuition 40000 + transport 10000 (gross 50000) unless told otherwise."""

    def _make(student, amounts=None, session=None):
        amounts = amounts or {"tuition": 40000, "transport": 10000}
        result = services.structures.create_structure(
            scope,
            {
                "student_id": student.id,
                "session_id": (session or academic_session).id,
                "line_items": [
                    {"fee_component_id": components[key].id, "adjusted_amount": amount}
                    for key, amount in amounts.items()
                ],
            },
        )
        return result.unwrap()

    return _make


@pytest.fixture
def make_scholarship(services, scope):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Scholarship {counter['n']}",
            "type": "percentage",
            "basis": "merit",
            "value": 10,
        }
        data.update(overrides)
        return services.scholarships.create_scholarship(scope, data).unwrap()

    return _make


@pytest.fixture
def assign(services, scope, academic_session, admin_id):
    def _assign(student, scholarship, session=None):
        return services.assignments.assign(
            scope,
            {
                "student_id": student.id,
                "scholarship_id": scholarship.id,
                "session_id": (session or academic_session).id,
            },
            approved_by_id=admin_id,
        ).unwrap()

    return _assign
