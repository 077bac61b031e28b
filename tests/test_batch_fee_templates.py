import pytest

from app.models.academics import Batch
from app.models.base import FeeStructureSource
from app.services.base import ErrorCode


@pytest.fixture
def template_input(batch, academic_session, components):
    return {
        "batch_id": batch.id,
        "session_id": academic_session.id,
        "name": "Class 10 A fees",
        "line_items": [
            {"fee_component_id": components["tuition"].id, "amount": 40000},
            {"fee_component_id": components["transport"].id, "amount": 10000},
        ],
    }


@pytest.fixture
def template(services, scope, template_input):
    return services.templates.create_or_update(scope, template_input).unwrap()


class TestTemplates:
    def test_create_template(self, template, batch, components):
        assert template.batch_id == batch.id
        assert template.total_amount == 50000
        assert template.is_active is True
        assert [(i.fee_component_id, i.amount) for i in template.line_items] == [
            (components["tuition"].id, 40000),
            (components["transport"].id, 10000),
        ]

    def test_saving_again_updates_in_place(self, services, scope, template, template_input, components):
        template_input["name"] = "Class 10 A fees (revised)"
        template_input["line_items"] = [{"fee_component_id": components["tuition"].id, "amount": 42000}]

        updated = services.templates.create_or_update(scope, template_input).unwrap()

        assert updated.id == template.id
        assert updated.name == "Class 10 A fees (revised)"
        assert updated.total_amount == 42000
        assert len(updated.line_items) == 1
        assert len(services.templates.list_templates(scope).unwrap()) == 1

    def test_non_positive_amount_is_rejected(self, services, scope, template_input):
        template_input["line_items"][0]["amount"] = 0
        assert services.templates.create_or_update(scope, template_input).error_code == ErrorCode.VALIDATION_ERROR

    def test_foreign_batch_is_not_found(self, db, services, scope, foreign_scope, template_input):
        foreign_batch = Batch(org_id=foreign_scope.org_id, branch_id=foreign_scope.branch_id, name="Class 9 B")
        db.add(foreign_batch)
        db.commit()
        template_input["batch_id"] = foreign_batch.id

        result = services.templates.create_or_update(scope, template_input)

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_get_and_list_are_scoped(self, services, scope, foreign_scope, template, batch, academic_session):
        assert services.templates.get_template(scope, template.id).unwrap() is template
        assert services.templates.get_for_batch(scope, batch.id, academic_session.id).unwrap() is template
        assert services.templates.list_templates(scope, session_id=academic_session.id).unwrap() == [template]

        assert services.templates.get_template(foreign_scope, template.id).error_code == ErrorCode.NOT_FOUND
        assert services.templates.list_templates(foreign_scope).unwrap() == []


class TestApply:
    def test_apply_creates_structures_for_active_students(
        self, services, scope, template, student, classmate, withdrawn_student, academic_session
    ):
        result = services.templates.apply_to_students(scope, template.id).unwrap()

        assert (result.applied, result.skipped) == (2, 0)
        assert result.message == "Applied fee structure to 2 students, skipped 0"

        structures = services.structures.list_for_session(scope, academic_session.id).unwrap()
        assert [s.student_id for s in structures] == [student.id, classmate.id]
        for structure in structures:
            assert structure.source == FeeStructureSource.TEMPLATE
            assert structure.batch_fee_structure_id == template.id
            assert structure.gross_amount == 50000
            assert [i.original_amount for i in structure.line_items] == [40000, 10000]

        assert services.structures.get_for_student(scope, withdrawn_student.id, academic_session.id).unwrap() is None

    def test_existing_structures_are_skipped(
        self, services, scope, template, student, classmate, make_structure, academic_session
    ):
        custom = make_structure(student, amounts={"tuition": 35000})

        result = services.templates.apply_to_students(scope, template.id).unwrap()

        assert (result.applied, result.skipped) == (1, 1)
        assert custom.source == FeeStructureSource.CUSTOM
        assert custom.gross_amount == 35000

    def test_overwrite_existing(self, services, scope, template, student, classmate, make_structure):
        custom = make_structure(student, amounts={"tuition": 35000})

        result = services.templates.apply_to_students(scope, template.id, overwrite_existing=True).unwrap()

        assert (result.applied, result.skipped) == (2, 0)
        assert custom.source == FeeStructureSource.TEMPLATE
        assert custom.batch_fee_structure_id == template.id
        assert custom.gross_amount == 50000
        assert custom.net_amount == 50000

    def test_scholarships_are_reflected(self, services, scope, template, student, classmate, make_scholarship, assign):
        merit = assign(student, make_scholarship(value=10))

        services.templates.apply_to_students(scope, template.id).unwrap()

        structure = services.structures.repository.get_for_student_session(student.id, template.session_id)
        assert merit.discount_amount == 5000
        assert structure.scholarship_amount == 5000
        assert structure.net_amount == 45000

    def test_apply_is_repeatable(self, services, scope, template, student, classmate):
        services.templates.apply_to_students(scope, template.id).unwrap()

        again = services.templates.apply_to_students(scope, template.id).unwrap()

        assert (again.applied, again.skipped) == (0, 2)

    def test_inactive_template_cannot_be_applied(self, db, services, scope, template, student):
        template.is_active = False
        db.commit()

        result = services.templates.apply_to_students(scope, template.id)

        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_foreign_caller_cannot_apply(self, services, foreign_scope, template, student):
        assert services.templates.apply_to_students(foreign_scope, template.id).error_code == ErrorCode.NOT_FOUND


def test_create_single_structure_from_template(services, scope, template, student):
    structure = services.structures.create_from_template(scope, student.id, template.id).unwrap()

    assert structure.source == FeeStructureSource.TEMPLATE
    assert structure.batch_fee_structure_id == template.id
    assert structure.session_id == template.session_id
    assert structure.net_amount == 50000
