from app.models.base import FeeComponentType
from app.schemas.common.pagination import PaginationParams
from app.schemas.fee_structure import FeeComponentFilter
from app.services.base import ErrorCode


def test_create_component(services, scope):
    result = services.components.create_component(
        scope, {"name": "Library Fee", "type": "library", "description": "Annual library access"}
    )

    assert result.is_success
    component = result.data
    assert component.org_id == scope.org_id
    assert component.type == FeeComponentType.LIBRARY
    assert component.is_active is True


def test_duplicate_name_within_type_is_rejected(services, scope, components):
    result = services.components.create_component(scope, {"name": "Tuition Fee", "type": "tuition"})

    assert not result.is_success
    assert result.error_code == ErrorCode.ALREADY_EXISTS


def test_same_name_with_other_type_is_allowed(services, scope, components):
    result = services.components.create_component(scope, {"name": "Tuition Fee", "type": "misc"})
    assert result.is_success


def test_same_name_in_other_org_is_allowed(services, foreign_scope, components):
    result = services.components.create_component(foreign_scope, {"name": "Tuition Fee", "type": "tuition"})
    assert result.is_success


def test_invalid_input_reports_field_errors(services, scope):
    result = services.components.create_component(scope, {"name": "", "type": "canteen"})

    assert result.error_code == ErrorCode.VALIDATION_ERROR
    field_errors = result.error.details["field_errors"]
    assert "name" in field_errors
    assert "type" in field_errors


def test_list_orders_by_type_then_name(services, scope, components):
    services.components.create_component(scope, {"name": "Admission Kit", "type": "admission"})
    services.components.create_component(scope, {"name": "Annual Tuition Top-up", "type": "tuition"})

    page = services.components.list_components(scope).unwrap()

    assert [(c.type.value, c.name) for c in page.items] == sorted(
        (c.type.value, c.name) for c in page.items
    )
    assert page.meta.total_items == 5


def test_list_paginates_and_filters(services, scope, components):
    page = services.components.list_components(
        scope, pagination=PaginationParams(page=2, page_size=2)
    ).unwrap()
    assert len(page.items) == 1
    assert page.meta.total_pages == 2
    assert page.meta.has_previous is True
    assert page.meta.has_next is False

    transport_only = services.components.list_components(
        scope, filters=FeeComponentFilter(type=FeeComponentType.TRANSPORT)
    ).unwrap()
    assert [c.name for c in transport_only.items] == ["Bus Fee"]


def test_list_is_tenant_scoped(services, foreign_scope, components):
    page = services.components.list_components(foreign_scope).unwrap()
    assert page.items == []
    assert page.meta.total_items == 0


def test_deactivated_components_are_hidden_by_default(services, scope, components):
    services.components.deactivate_component(scope, components["lab"].id).unwrap()

    active = services.components.list_components(scope).unwrap()
    everything = services.components.list_components(scope, filters=FeeComponentFilter(is_active=None)).unwrap()

    assert "Science Lab" not in [c.name for c in active.items]
    assert "Science Lab" in [c.name for c in everything.items]
    assert components["lab"].id not in [c.id for c in services.components.list_all_active(scope).unwrap()]


def test_update_component(services, scope, components):
    updated = services.components.update_component(
        scope, components["transport"].id, {"name": "School Bus Fee", "description": "Route 4"}
    ).unwrap()

    assert updated.name == "School Bus Fee"
    assert updated.description == "Route 4"
    assert updated.type == FeeComponentType.TRANSPORT


def test_update_rejects_name_clash(services, scope, components):
    services.components.create_component(scope, {"name": "Van Fee", "type": "transport"}).unwrap()

    result = services.components.update_component(scope, components["transport"].id, {"name": "Van Fee"})

    assert result.error_code == ErrorCode.ALREADY_EXISTS


def test_foreign_component_is_not_found(services, foreign_scope, components):
    result = services.components.get_component(foreign_scope, components["tuition"].id)

    assert result.error_code == ErrorCode.NOT_FOUND
    assert services.components.deactivate_component(foreign_scope, components["tuition"].id).error_code == (
        ErrorCode.NOT_FOUND
    )
    assert components["tuition"].is_active is True


def test_concurrent_duplicate_surfaces_as_already_exists(monkeypatch, services, scope, components):
    # Another writer inserted the same component between the check and the insert
    monkeypatch.setattr(services.components.repository, "find_by_name", lambda *args: None)

    result = services.components.create_component(scope, {"name": "Tuition Fee", "type": "tuition"})

    assert result.error_code == ErrorCode.ALREADY_EXISTS
    assert [c.name for c in services.components.list_all_active(scope).unwrap()].count("Tuition Fee") == 1
