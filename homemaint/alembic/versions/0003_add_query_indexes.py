"""Add indexes for date-ordered and status-filtered queries.

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-12 14:00:00.000000

- maintenance_records.date: recent records and date range lookups
- tasks(status, due_date): overdue, upcoming and pending task lists
- assets.warranty_expiration: expiring warranty lookups
"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0003"
down_revision: str | None = "0002"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create query indexes."""
    op.create_index("idx_maintenance_records_date", "maintenance_records", ["date"])
    op.create_index("idx_tasks_status_due_date", "tasks", ["status", "due_date"])
    op.create_index("idx_assets_warranty_expiration", "assets", ["warranty_expiration"])


def downgrade() -> None:
    """Drop query indexes."""
    op.drop_index("idx_assets_warranty_expiration", table_name="assets")
    op.drop_index("idx_tasks_status_due_date", table_name="tasks")
    op.drop_index("idx_maintenance_records_date", table_name="maintenance_records")
