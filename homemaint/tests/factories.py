"""Test factories using factory_boy for generating test data.

Factories build plain, unsaved model instances. They are used by unit tests
for model properties and, through ``fields()``, to produce keyword arguments
for repository ``create()`` calls in integration tests.

Usage:
    from factories import AssetFactory, fields

    asset = AssetFactory.build(warranty_expiration=None)
    created = await AssetRepository(session).create(**fields(AssetFactory, home_id=home.id))
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import factory
from factory import LazyFunction, Sequence

from homemaint.models import (
    Asset,
    Attachment,
    AttachmentType,
    MaintenanceRecord,
    MaintenanceTask,
    MaintenanceType,
    ServiceProvider,
    TaskPriority,
    TaskStatus,
)


def _now() -> datetime:
    return datetime.now(UTC)


def fields(factory_class: type[factory.Factory], **overrides: Any) -> dict[str, Any]:
    """Return the attribute dict a factory would build, without the model."""
    return factory.build(dict, FACTORY_CLASS=factory_class, **overrides)


class AssetFactory(factory.Factory):
    """Factory for creating Asset model instances.

    home_id must be supplied when the result is persisted.
    """

    class Meta:
        model = Asset

    name: str = Sequence(lambda n: f"Asset {n}")
    manufacturer: str | None = "Acme"
    model_number: str | None = Sequence(lambda n: f"AC-{n:04d}")
    serial_number: str | None = None
    purchase_date: datetime | None = None
    installation_date: datetime | None = None
    warranty_expiration: datetime | None = LazyFunction(lambda: _now() + timedelta(days=365))
    notes: str | None = None


class ServiceProviderFactory(factory.Factory):
    class Meta:
        model = ServiceProvider

    company: str = Sequence(lambda n: f"Provider {n} LLC")
    name: str | None = "Pat Smith"
    phone: str | None = "555-0100"
    email: str | None = None
    specialty: str | None = "Plumbing"
    notes: str | None = None


class MaintenanceRecordFactory(factory.Factory):
    """Factory for MaintenanceRecord instances; asset_id must be supplied."""

    class Meta:
        model = MaintenanceRecord

    date: datetime = LazyFunction(_now)
    type: str = MaintenanceType.REPAIR.value
    description: str | None = Sequence(lambda n: f"Service visit {n}")
    cost: str | None = "100.00"
    notes: str | None = None


class MaintenanceTaskFactory(factory.Factory):
    class Meta:
        model = MaintenanceTask

    title: str = Sequence(lambda n: f"Task {n}")
    description: str | None = None
    due_date: datetime | None = LazyFunction(lambda: _now() + timedelta(days=7))
    priority: str | None = TaskPriority.MEDIUM.value
    status: str = TaskStatus.PENDING.value


class AttachmentFactory(factory.Factory):
    class Meta:
        model = Attachment

    type: str = AttachmentType.PHOTO.value
    filename: str = Sequence(lambda n: f"photo_{n}.jpg")
    relative_path: str = Sequence(lambda n: f"2024/06/{n:016x}.jpg")
    file_size: int | None = 2048
    mime_type: str | None = "image/jpeg"
