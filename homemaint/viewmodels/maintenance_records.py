"""Maintenance record list view model with filters, search and cost totals.

At most one server-side filter is active at a time: an asset, a service
provider, or a date range. The free-text search narrows the loaded records in
memory.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from homemaint.core.exceptions import HomeMaintError
from homemaint.core.logging import get_logger, sanitize_error
from homemaint.repositories import MaintenanceRecordRepository
from homemaint.viewmodels.base import ViewModel

if TYPE_CHECKING:
    from homemaint.core.database import Database
    from homemaint.models import MaintenanceRecord

logger = get_logger(__name__)


def _contains(text: str | None, query: str) -> bool:
    return text is not None and query in text.casefold()


class MaintenanceRecordListViewModel(ViewModel):
    def __init__(self, database: Database) -> None:
        super().__init__(database)
        self.records: list[MaintenanceRecord] = []
        self.search_query = ""
        self.filter_asset_id: int | None = None
        self.filter_provider_id: int | None = None
        self.start_date: datetime | None = None
        self.end_date: datetime | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_records(self) -> None:
        """Load records honouring whichever filter is set."""
        async with self._loading("Failed to load maintenance records"):
            async with self.database.session() as session:
                repo = MaintenanceRecordRepository(session)
                if self.filter_asset_id is not None:
                    records = await repo.find_by_asset_id(self.filter_asset_id)
                elif self.filter_provider_id is not None:
                    records = await repo.find_by_service_provider_id(self.filter_provider_id)
                elif self.start_date is not None and self.end_date is not None:
                    records = await repo.find_by_date_range(self.start_date, self.end_date)
                else:
                    records = await repo.find_all()
            self.records = records

    async def load_records_for_asset(self, asset_id: int) -> None:
        self._clear_filters()
        self.filter_asset_id = asset_id
        await self.load_records()

    async def load_records_for_provider(self, provider_id: int) -> None:
        self._clear_filters()
        self.filter_provider_id = provider_id
        await self.load_records()

    async def load_records_in_range(self, start: datetime, end: datetime) -> None:
        self._clear_filters()
        self.start_date = start
        self.end_date = end
        await self.load_records()

    async def load_recent_records(self, limit: int = 10) -> None:
        async with self._loading("Failed to load recent records"):
            async with self.database.session() as session:
                records = await MaintenanceRecordRepository(session).find_recent(limit=limit)
            self.records = records

    async def clear_filters(self) -> None:
        """Drop every filter and the search query, then reload."""
        self._clear_filters()
        self.search_query = ""
        await self.load_records()

    def _clear_filters(self) -> None:
        self.filter_asset_id = None
        self.filter_provider_id = None
        self.start_date = None
        self.end_date = None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def delete_record(self, record: MaintenanceRecord) -> None:
        if record.id is None:
            return
        async with self._handling_errors("Failed to delete record"):
            async with self.database.session() as session:
                await MaintenanceRecordRepository(session).delete(record.id)
            await self.load_records()

    async def get_total_cost_for_asset(self, asset_id: int) -> Decimal:
        """Total recorded cost for one asset; zero if it cannot be computed."""
        try:
            async with self.database.session() as session:
                return await MaintenanceRecordRepository(session).get_total_cost(asset_id)
        except HomeMaintError as e:
            logger.warning(f"Could not total costs for asset {asset_id}: {sanitize_error(e)}")
            return Decimal("0")

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def filtered_records(self) -> list[MaintenanceRecord]:
        """Loaded records matching the search query in type, description or notes."""
        query = self.search_query.strip().casefold()
        if not query:
            return list(self.records)
        return [
            record
            for record in self.records
            if _contains(record.type, query)
            or _contains(record.description, query)
            or _contains(record.notes, query)
        ]

    @property
    def total_cost(self) -> Decimal:
        """Sum of loaded record costs; records without a cost count as zero."""
        return sum(
            (record.cost_decimal or Decimal("0") for record in self.records), Decimal("0")
        )

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def average_cost(self) -> Decimal:
        """Total cost divided by the number of loaded records.

        Records without a cost are included in the denominator.
        """
        if not self.records:
            return Decimal("0")
        return self.total_cost / Decimal(self.record_count)
