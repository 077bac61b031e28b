import uuid

from app.models.academics import AcademicSession
from app.models.base import CustomDiscountType, FeeComponentType, FeeStructureSource
from app.models.fee_structure import FeeComponent
from app.services.base import ErrorCode


def _line(component, amount, **extra):
    return {"fee_component_id": component.id, "adjusted_amount": amount, **extra}


def _create(services, scope, student, academic_session, line_items, **extra):
    return services.structures.create_structure(
        scope,
        {"student_id": student.id, "session_id": academic_session.id, "line_items": line_items, **extra},
    )


class TestCreate:
    def test_create_custom_structure(self, services, scope, student, academic_session, components):
        result = _create(
            services,
            scope,
            student,
            academic_session,
            [_line(components["tuition"], 40000, original_amount=45000), _line(components["transport"], 10000)],
            remarks="Mid-year admission",
        )

        assert result.is_success
        structure = result.data
        assert structure.source == FeeStructureSource.CUSTOM
        assert structure.gross_amount == 50000
        assert structure.scholarship_amount == 0
        assert structure.custom_discount_amount == 0
        assert structure.net_amount == 50000
        assert structure.remarks == "Mid-year admission"
        assert [(i.position, i.original_amount, i.adjusted_amount) for i in structure.line_items] == [
            (0, 45000, 40000),
            (1, 10000, 10000),
        ]

    def test_waived_line_item_counts_as_zero(self, services, scope, student, academic_session, components):
        structure = _create(
            services,
            scope,
            student,
            academic_session,
            [
                _line(components["tuition"], 40000),
                _line(components["lab"], 0, original_amount=3000, waived=True, waiver_reason="Staff ward"),
            ],
        ).unwrap()

        assert structure.gross_amount == 40000
        lab = structure.line_item_for(components["lab"].id)
        assert lab.waived is True
        assert lab.original_amount == 3000
        assert lab.waiver_reason == "Staff ward"

    def test_waived_line_item_with_amount_is_rejected(self, services, scope, student, academic_session, components):
        result = _create(services, scope, student, academic_session, [_line(components["lab"], 3000, waived=True)])
        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_repeated_component_is_rejected(self, services, scope, student, academic_session, components):
        result = _create(
            services,
            scope,
            student,
            academic_session,
            [_line(components["tuition"], 40000), _line(components["tuition"], 1000)],
        )
        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_empty_line_items_are_rejected(self, services, scope, student, academic_session):
        result = _create(services, scope, student, academic_session, [])

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert "line_items" in result.error.details["field_errors"]

    def test_second_structure_for_same_session_is_rejected(
        self, services, scope, student, academic_session, components, make_structure
    ):
        make_structure(student)

        result = _create(services, scope, student, academic_session, [_line(components["tuition"], 1000)])

        assert result.error_code == ErrorCode.ALREADY_EXISTS
        assert len(services.structures.repository.list_for_student(student.id)) == 1

    def test_other_session_is_allowed(self, db, services, scope, student, components, make_structure):
        next_session = AcademicSession(org_id=scope.org_id, name="2026-27", is_current=False)
        db.add(next_session)
        db.commit()

        make_structure(student)
        structure = make_structure(student, amounts={"tuition": 42000}, session=next_session)

        assert structure.session_id == next_session.id
        assert structure.gross_amount == 42000

    def test_foreign_student_is_not_found(self, services, foreign_scope, student, academic_session, components):
        result = _create(services, foreign_scope, student, academic_session, [_line(components["tuition"], 1000)])
        assert result.error_code == ErrorCode.NOT_FOUND

    def test_unknown_session_is_not_found(self, services, scope, student, components):
        result = services.structures.create_structure(
            scope,
            {
                "student_id": student.id,
                "session_id": uuid.uuid4(),
                "line_items": [_line(components["tuition"], 1000)],
            },
        )
        assert result.error_code == ErrorCode.NOT_FOUND

    def test_component_of_other_org_is_not_found(
        self, db, services, scope, foreign_scope, student, academic_session
    ):
        foreign_component = FeeComponent(org_id=foreign_scope.org_id, name="Tuition Fee", type=FeeComponentType.TUITION)
        db.add(foreign_component)
        db.commit()

        result = _create(services, scope, student, academic_session, [_line(foreign_component, 1000)])

        assert result.error_code == ErrorCode.NOT_FOUND
        assert services.structures.repository.get_for_student_session(student.id, academic_session.id) is None

    def test_inactive_component_is_not_found(self, services, scope, student, academic_session, components):
        services.components.deactivate_component(scope, components["lab"].id).unwrap()

        result = _create(services, scope, student, academic_session, [_line(components["lab"], 3000)])
        assert result.error_code == ErrorCode.NOT_FOUND

    def test_existing_scholarship_applies_on_create(
        self, student, academic_session, make_scholarship, assign, make_structure
    ):
        assignment = assign(student, make_scholarship(value=10))
        assert assignment.discount_amount == 0

        structure = make_structure(student)

        assert assignment.discount_amount == 5000
        assert structure.scholarship_amount == 5000
        assert structure.net_amount == 45000


class TestUpdate:
    def test_replacing_line_items_marks_structure_custom(
        self, db, services, scope, student, academic_session, components
    ):
        template = services.templates.create_or_update(
            scope,
            {
                "batch_id": student.batch_id,
                "session_id": academic_session.id,
                "name": "Class 10 fees",
                "line_items": [{"fee_component_id": components["tuition"].id, "amount": 40000}],
            },
        ).unwrap()
        structure = services.structures.create_from_template(scope, student.id, template.id).unwrap()
        assert structure.source == FeeStructureSource.TEMPLATE

        updated = services.structures.update_structure(
            scope,
            structure.id,
            {"line_items": [_line(components["tuition"], 38000), _line(components["lab"], 2500)]},
        ).unwrap()

        assert updated.source == FeeStructureSource.CUSTOM
        assert updated.gross_amount == 40500
        assert updated.net_amount == 40500
        assert [i.fee_component_id for i in updated.line_items] == [components["tuition"].id, components["lab"].id]

    def test_remarks_only_update_keeps_source_and_totals(self, services, scope, student, make_structure):
        structure = make_structure(student)

        updated = services.structures.update_structure(scope, structure.id, {"remarks": "Verified"}).unwrap()

        assert updated.remarks == "Verified"
        assert updated.source == FeeStructureSource.CUSTOM
        assert updated.net_amount == 50000
        assert len(updated.line_items) == 2

    def test_update_recalculates_scholarships(
        self, services, scope, student, components, make_structure, make_scholarship, assign
    ):
        structure = make_structure(student)
        assignment = assign(student, make_scholarship(value=10))
        assert structure.net_amount == 45000

        services.structures.update_structure(
            scope, structure.id, {"line_items": [_line(components["tuition"], 60000)]}
        ).unwrap()

        assert assignment.discount_amount == 6000
        assert structure.scholarship_amount == 6000
        assert structure.net_amount == 54000

    def test_failed_update_leaves_structure_untouched(self, services, scope, student, make_structure):
        structure = make_structure(student)

        result = services.structures.update_structure(
            scope, structure.id, {"line_items": [{"fee_component_id": uuid.uuid4(), "adjusted_amount": 100}]}
        )

        assert result.error_code == ErrorCode.NOT_FOUND
        assert structure.gross_amount == 50000
        assert len(structure.line_items) == 2

    def test_foreign_structure_is_not_found(self, services, foreign_scope, student, make_structure):
        structure = make_structure(student)
        result = services.structures.update_structure(foreign_scope, structure.id, {"remarks": "x"})
        assert result.error_code == ErrorCode.NOT_FOUND


class TestCustomDiscount:
    def test_percentage_discount(self, services, scope, student, make_structure):
        structure = make_structure(student)

        updated = services.structures.set_custom_discount(
            scope, structure.id, {"type": "percentage", "value": 10, "remarks": "Sibling"}
        ).unwrap()

        assert updated.custom_discount_type == CustomDiscountType.PERCENTAGE
        assert updated.custom_discount_value == 10
        assert updated.custom_discount_amount == 5000
        assert updated.net_amount == 45000

    def test_fixed_discount_stacks_with_scholarship(
        self, services, scope, student, make_structure, make_scholarship, assign
    ):
        structure = make_structure(student)
        assign(student, make_scholarship(value=10))

        services.structures.set_custom_discount(scope, structure.id, {"type": "fixed_amount", "value": 2000}).unwrap()

        assert structure.scholarship_amount == 5000
        assert structure.custom_discount_amount == 2000
        assert structure.net_amount == 43000

    def test_net_floors_at_zero(self, services, scope, student, make_structure, make_scholarship, assign):
        structure = make_structure(student)
        assign(student, make_scholarship(type="fixed_amount", value=30000))

        services.structures.set_custom_discount(scope, structure.id, {"type": "fixed_amount", "value": 25000}).unwrap()

        assert structure.scholarship_amount == 30000
        assert structure.custom_discount_amount == 25000
        assert structure.net_amount == 0

    def test_invalid_discount_is_rejected(self, services, scope, student, make_structure):
        structure = make_structure(student)

        over = services.structures.set_custom_discount(scope, structure.id, {"type": "percentage", "value": 101})
        waiver = services.structures.set_custom_discount(
            scope, structure.id, {"type": "component_waiver", "value": 1}
        )

        assert over.error_code == ErrorCode.VALIDATION_ERROR
        assert waiver.error_code == ErrorCode.VALIDATION_ERROR
        assert structure.custom_discount_amount == 0

    def test_clear_discount(self, services, scope, student, make_structure):
        structure = make_structure(student)
        services.structures.set_custom_discount(scope, structure.id, {"type": "percentage", "value": 10}).unwrap()

        cleared = services.structures.clear_custom_discount(scope, structure.id).unwrap()

        assert cleared.custom_discount_type is None
        assert cleared.custom_discount_value is None
        assert cleared.custom_discount_amount == 0
        assert cleared.net_amount == 50000

    def test_line_item_change_rederives_percentage_discount(self, services, scope, student, components, make_structure):
        structure = make_structure(student)
        services.structures.set_custom_discount(scope, structure.id, {"type": "percentage", "value": 10}).unwrap()

        services.structures.update_structure(
            scope, structure.id, {"line_items": [_line(components["tuition"], 60000)]}
        ).unwrap()

        assert structure.custom_discount_amount == 6000
        assert structure.net_amount == 54000


class TestReads:
    def test_detail_resolves_components(self, services, scope, student, make_structure):
        structure = make_structure(student)
        services.structures.set_custom_discount(scope, structure.id, {"type": "fixed_amount", "value": 1500}).unwrap()

        detail = services.structures.get_structure(scope, structure.id).unwrap()

        assert detail.student_name == "Asha Sharma"
        assert detail.session_name == "2025-26"
        assert [(i.component_name, i.component_type.value) for i in detail.line_items] == [
            ("Tuition Fee", "tuition"),
            ("Bus Fee", "transport"),
        ]
        assert detail.custom_discount.amount == 1500
        assert detail.net_amount == 48500

    def test_detail_of_foreign_structure_is_not_found(self, services, foreign_scope, student, make_structure):
        structure = make_structure(student)
        assert services.structures.get_structure(foreign_scope, structure.id).error_code == ErrorCode.NOT_FOUND

    def test_get_for_student(self, services, scope, student, classmate, academic_session, make_structure):
        structure = make_structure(student)

        assert services.structures.get_for_student(scope, student.id, academic_session.id).unwrap() is structure
        assert services.structures.get_for_student(scope, classmate.id, academic_session.id).unwrap() is None

    def test_list_for_session_skips_inactive_students(
        self, services, scope, student, classmate, withdrawn_student, academic_session, make_structure
    ):
        make_structure(classmate)
        make_structure(withdrawn_student)
        make_structure(student)

        structures = services.structures.list_for_session(scope, academic_session.id).unwrap()

        assert [s.student_id for s in structures] == [student.id, classmate.id]

    def test_student_summary(self, services, scope, student, academic_session, make_structure, make_scholarship, assign):
        structure = make_structure(student)
        assign(student, make_scholarship(value=10))
        services.structures.set_custom_discount(scope, structure.id, {"type": "fixed_amount", "value": 1000}).unwrap()

        summary = services.structures.get_student_fee_summary(scope, student.id).unwrap()

        assert summary.student_name == "Asha Sharma"
        [item] = summary.fee_structures
        assert item.session_name == "2025-26"
        assert item.is_current_session is True
        assert item.gross_amount == 50000
        assert item.scholarship_amount == 5000
        assert item.custom_discount.amount == 1000
        assert item.net_amount == 44000
        assert item.line_item_count == 2

    def test_summary_without_structures(self, services, scope, classmate):
        summary = services.structures.get_student_fee_summary(scope, classmate.id).unwrap()
        assert summary.fee_structures == []
