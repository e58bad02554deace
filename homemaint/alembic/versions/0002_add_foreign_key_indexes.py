"""Add indexes on foreign key columns used by lookup queries.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-05 09:30:00.000000

Every finder that filters by a parent id (assets by home, records by asset,
and so on) gets an index on that column.
"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# (index name, table, columns)
FOREIGN_KEY_INDEXES: list[tuple[str, str, list[str]]] = [
    ("idx_categories_home_id", "categories", ["home_id"]),
    ("idx_locations_home_id", "locations", ["home_id"]),
    ("idx_service_providers_home_id", "service_providers", ["home_id"]),
    ("idx_assets_home_id", "assets", ["home_id"]),
    ("idx_assets_category_id", "assets", ["category_id"]),
    ("idx_assets_location_id", "assets", ["location_id"]),
    ("idx_maintenance_records_asset_id", "maintenance_records", ["asset_id"]),
    (
        "idx_maintenance_records_service_provider_id",
        "maintenance_records",
        ["service_provider_id"],
    ),
    ("idx_tasks_asset_id", "tasks", ["asset_id"]),
    ("idx_attachments_asset_id", "attachments", ["asset_id"]),
    ("idx_attachments_maintenance_record_id", "attachments", ["maintenance_record_id"]),
]


def upgrade() -> None:
    """Create foreign key lookup indexes."""
    for name, table, columns in FOREIGN_KEY_INDEXES:
        op.create_index(name, table, columns, unique=False)


def downgrade() -> None:
    """Drop foreign key lookup indexes."""
    for name, table, _ in reversed(FOREIGN_KEY_INDEXES):
        op.drop_index(name, table_name=table)
