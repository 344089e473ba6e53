"""
Shared Schemas
"""

from uuid import UUID

from pydantic import BaseModel


class AuditUserInfo(BaseModel):
    """Creator or last updater of a record."""

    id: UUID
    full_name: str


class ReconcileResponse(BaseModel):
    """Result of a manual status reconciliation."""

    activated_count: int
    deactivated_count: int
    message: str = "Statuses updated successfully"
