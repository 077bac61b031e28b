"""
Discount Calculator

Pure functions deriving a discount amount (minor units) from a discount
definition and a gross basis. Shared by scholarship discounts and the
student-specific custom discount. No I/O, no side effects; identical
inputs always give identical outputs, so recalculation is idempotent.
"""

from enum import Enum
from typing import Optional, Union
from uuid import UUID

from app.core.exceptions import ValidationError
from app.models.base import CustomDiscountType, ScholarshipType
from app.utils.money import clamp, percent_of

PERCENTAGE = ScholarshipType.PERCENTAGE.value
FIXED_AMOUNT = ScholarshipType.FIXED_AMOUNT.value
COMPONENT_WAIVER = ScholarshipType.COMPONENT_WAIVER.value

DiscountKind = Union[ScholarshipType, CustomDiscountType, str]


def _kind_value(kind: DiscountKind) -> str:
    if isinstance(kind, Enum):
        return kind.value
    return str(kind)


def compute_discount(
    kind: DiscountKind,
    value: Optional[int],
    gross_amount: int,
    max_amount: Optional[int] = None,
    component_amount: Optional[int] = None,
) -> int:
    """
    Compute a discount amount.

    - percentage: ``round(gross * min(value, 100) / 100)``, then capped at
      ``max_amount`` when one is set.
    - fixed_amount: ``min(value, gross)``.
    - component_waiver: the adjusted amount of the waived line item, or 0
      when the component is not part of the structure.

    Non-positive ``gross_amount`` or ``value`` yields 0. The result always
    lies in ``[0, gross_amount]``.
    """
    kind = _kind_value(kind)

    if gross_amount is None or gross_amount <= 0:
        return 0

    if kind == COMPONENT_WAIVER:
        if component_amount is None:
            return 0
        return clamp(component_amount, 0, gross_amount)

    if value is None or value <= 0:
        return 0

    if kind == PERCENTAGE:
        discount = percent_of(gross_amount, min(value, 100))
        if max_amount is not None:
            discount = min(discount, max_amount)
        return clamp(discount, 0, gross_amount)

    if kind == FIXED_AMOUNT:
        return min(value, gross_amount)

    raise ValidationError(
        f"Unsupported discount type: {kind}",
        field_errors={"type": [f"unsupported discount type '{kind}'"]},
    )


def compute_scholarship_discount(scholarship, structure) -> int:
    """
    Discount granted by ``scholarship`` against ``structure``'s current gross.

    For component waivers the basis is the matching line item's
    ``adjusted_amount``; a missing line item waives nothing.
    """
    component_amount = None
    if _kind_value(scholarship.type) == COMPONENT_WAIVER and scholarship.component_id:
        line_item = structure.line_item_for(scholarship.component_id)
        if line_item is not None:
            component_amount = line_item.adjusted_amount

    return compute_discount(
        scholarship.type,
        scholarship.value,
        structure.gross_amount,
        max_amount=scholarship.max_amount if _kind_value(scholarship.type) == PERCENTAGE else None,
        component_amount=component_amount,
    )


def placeholder_scholarship_discount(scholarship) -> int:
    """
    Best-effort discount for an assignment made before any fee structure exists.

    Corrected by recalculation once the structure is created.
    """
    if _kind_value(scholarship.type) == FIXED_AMOUNT:
        return max(scholarship.value, 0)
    return 0


def compute_custom_discount(kind: DiscountKind, value: int, gross_amount: int) -> int:
    """
    Custom discount amount. Same mechanics as scholarships, without the
    component waiver variant and without a separate cap.
    """
    if _kind_value(kind) not in (PERCENTAGE, FIXED_AMOUNT):
        raise ValidationError(
            "Custom discount must be 'percentage' or 'fixed_amount'",
            field_errors={"type": [f"unsupported custom discount type '{_kind_value(kind)}'"]},
        )
    return compute_discount(kind, value, gross_amount)


def validate_discount_config(
    kind: DiscountKind,
    value: Optional[int],
    max_amount: Optional[int] = None,
    component_id: Optional[UUID] = None,
) -> None:
    """
    Reject malformed discount definitions before anything is computed or stored.

    Raises:
        ValidationError: with per-field messages
    """
    kind = _kind_value(kind)
    errors = {}

    if kind not in (PERCENTAGE, FIXED_AMOUNT, COMPONENT_WAIVER):
        errors.setdefault("type", []).append(f"unsupported discount type '{kind}'")

    if value is None or value <= 0:
        errors.setdefault("value", []).append("value must be greater than zero")
    elif kind == PERCENTAGE and value > 100:
        errors.setdefault("value", []).append("percentage value must be between 0 and 100")

    if kind == COMPONENT_WAIVER and component_id is None:
        errors.setdefault("component_id", []).append("component_id is required for component_waiver")
    if kind != COMPONENT_WAIVER and component_id is not None:
        errors.setdefault("component_id", []).append("component_id is only allowed for component_waiver")

    if max_amount is not None:
        if max_amount <= 0:
            errors.setdefault("max_amount", []).append("max_amount must be greater than zero")
        elif kind != PERCENTAGE:
            errors.setdefault("max_amount", []).append("max_amount only applies to percentage scholarships")

    if errors:
        raise ValidationError("Invalid discount configuration", field_errors=errors)
