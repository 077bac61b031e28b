"""
Tenant scope schema.

Resolved by the surrounding auth layer and passed to every fee engine
operation; all reads and writes are filtered by it.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import ConfigDict, Field

from app.schemas.common.base import BaseSchema

__all__ = ["TenantScope"]


class TenantScope(BaseSchema):
    """Organization and branch the caller is acting within."""

    model_config = ConfigDict(frozen=True, validate_assignment=False)

    org_id: UUID = Field(..., description="Organization identifier")
    branch_id: UUID = Field(..., description="Branch identifier")
