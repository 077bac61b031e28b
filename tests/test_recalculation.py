import uuid
from types import SimpleNamespace

import pytest

from app.core.exceptions import ConsistencyError, DuplicateComponentError
from app.db.unit_of_work import UnitOfWork
from app.models.academics import AcademicSession
from app.services.base import ErrorCode
from app.services.fee_structure import assert_structure_consistent


def _snapshot(gross, scholarship, custom, net, items):
    return SimpleNamespace(
        id=uuid.uuid4(),
        gross_amount=gross,
        scholarship_amount=scholarship,
        custom_discount_amount=custom,
        net_amount=net,
        line_items=[SimpleNamespace(adjusted_amount=amount) for amount in items],
    )


class TestConsistencyCheck:
    def test_consistent_snapshot_passes(self):
        assert_structure_consistent(_snapshot(50000, 5000, 2000, 43000, [40000, 10000]))
        assert_structure_consistent(_snapshot(50000, 30000, 25000, 0, [50000]))

    @pytest.mark.parametrize(
        "snapshot",
        [
            _snapshot(50000, 0, 0, 50000, [40000]),
            _snapshot(50000, 5000, 0, 46000, [50000]),
            _snapshot(50000, 0, 0, 50001, [50000]),
            _snapshot(50000, -10, 0, 50000, [50000]),
        ],
    )
    def test_broken_snapshot_is_rejected(self, snapshot):
        with pytest.raises(ConsistencyError) as exc_info:
            assert_structure_consistent(snapshot)
        assert exc_info.value.details["problems"]


class TestRecalculate:
    def test_without_structure_returns_none(self, services, scope, student, academic_session):
        result = services.recalculation.recalculate(scope, student.id, academic_session.id)

        assert result.is_success
        assert result.data is None

    def test_foreign_student_is_not_found(self, services, foreign_scope, student, academic_session):
        result = services.recalculation.recalculate(foreign_scope, student.id, academic_session.id)
        assert result.error_code == ErrorCode.NOT_FOUND

    def test_foreign_session_is_not_found(self, db, services, scope, foreign_scope, student, make_structure):
        make_structure(student)
        foreign_session = AcademicSession(org_id=foreign_scope.org_id, name="2025-26", is_current=True)
        db.add(foreign_session)
        db.commit()

        result = services.recalculation.recalculate(scope, student.id, foreign_session.id)

        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.data is None

    def test_unknown_session_is_not_found(self, services, scope, student):
        result = services.recalculation.recalculate(scope, student.id, uuid.uuid4())
        assert result.error_code == ErrorCode.NOT_FOUND

    def test_sessions_are_independent(self, db, scope, student, make_structure, make_scholarship, assign):
        next_session = AcademicSession(org_id=scope.org_id, name="2026-27", is_current=False)
        db.add(next_session)
        db.commit()
        current = make_structure(student)
        upcoming = make_structure(student, session=next_session)

        assign(student, make_scholarship(value=10), session=next_session)

        assert current.net_amount == 50000
        assert upcoming.net_amount == 45000

    def test_inconsistent_snapshot_rolls_back(
        self, monkeypatch, services, scope, student, make_structure, make_scholarship, assign
    ):
        structure = make_structure(student)
        scholarship = make_scholarship(value=10)
        monkeypatch.setattr(
            "app.services.fee_structure.recalculation_service.net_amount",
            lambda gross_amount, *discounts: gross_amount + 1,
        )

        result = services.assignments.assign(
            scope,
            {"student_id": student.id, "scholarship_id": scholarship.id, "session_id": structure.session_id},
            approved_by_id=uuid.uuid4(),
        )

        assert result.error_code == ErrorCode.CONSISTENCY_ERROR
        monkeypatch.undo()
        assert structure.scholarship_amount == 0
        assert structure.net_amount == 50000
        assert services.assignments.list_for_student(scope, student.id).unwrap() == []


class TestUnitOfWork:
    def test_nested_scope_joins_outer(self, db, scope):
        uow = UnitOfWork(db)

        with uow.begin() as outer:
            with uow.begin() as inner:
                db.add(AcademicSession(org_id=scope.org_id, name="2030-31"))
                assert inner.joined is True
                assert uow.is_active
            assert outer.joined is False

        assert outer.committed is True
        assert not uow.is_active
        assert db.query(AcademicSession).filter_by(name="2030-31").count() == 1

    def test_failure_in_nested_scope_rolls_back_everything(self, db, scope):
        uow = UnitOfWork(db)

        with pytest.raises(RuntimeError):
            with uow.begin() as outer:
                db.add(AcademicSession(org_id=scope.org_id, name="2031-32"))
                with uow.begin():
                    db.add(AcademicSession(org_id=scope.org_id, name="2032-33"))
                    raise RuntimeError("boom")

        assert outer.rolled_back is True
        assert not uow.is_active
        assert db.query(AcademicSession).filter(AcademicSession.name.in_(["2031-32", "2032-33"])).count() == 0

    def test_run_returns_callback_result(self, db, scope):
        uow = UnitOfWork(db)

        created = uow.run(lambda session: session.add(AcademicSession(org_id=scope.org_id, name="2033-34")) or 42)

        assert created == 42
        assert db.query(AcademicSession).filter_by(name="2033-34").count() == 1

    def test_service_call_inside_open_scope_propagates_failure(self, db, scope, services, components):
        uow = UnitOfWork(db)

        with pytest.raises(DuplicateComponentError):
            with uow.begin() as outer:
                created = services.components.create_component(scope, {"name": "Hostel Fee", "type": "misc"})
                assert created.is_success
                services.components.create_component(scope, {"name": "Tuition Fee", "type": "tuition"})

        assert outer.rolled_back is True
        names = {component.name for component in services.components.list_all_active(scope).unwrap()}
        assert "Hostel Fee" not in names

    def test_service_call_inside_open_scope_does_not_commit(self, db, scope, services):
        uow = UnitOfWork(db)

        with uow.begin():
            result = services.components.create_component(scope, {"name": "Hostel Fee", "type": "misc"})
            assert result.is_success
            db.rollback()

        assert services.components.list_all_active(scope).unwrap() == []
