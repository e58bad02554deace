"""Enumeration types for the home maintenance tracker."""

from enum import Enum


class WarrantyStatus(str, Enum):
    """Warranty state of an asset relative to the current time.

    - ACTIVE: expires more than 30 days from now
    - EXPIRING_SOON: expires within the next 30 days
    - EXPIRED: expiration is in the past
    - UNKNOWN: no expiration recorded
    """

    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    UNKNOWN = "unknown"

    @property
    def display_text(self) -> str:
        return _WARRANTY_DISPLAY[self][0]

    @property
    def color(self) -> str:
        return _WARRANTY_DISPLAY[self][1]

    def __str__(self) -> str:
        return self.value


_WARRANTY_DISPLAY: dict[WarrantyStatus, tuple[str, str]] = {
    WarrantyStatus.ACTIVE: ("Active", "green"),
    WarrantyStatus.EXPIRING_SOON: ("Expiring Soon", "orange"),
    WarrantyStatus.EXPIRED: ("Expired", "red"),
    WarrantyStatus.UNKNOWN: ("Unknown", "gray"),
}


class TaskStatus(str, Enum):
    """Lifecycle states of a maintenance task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    def __str__(self) -> str:
        return self.value


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return _PRIORITY_COLORS[self]

    def __str__(self) -> str:
        return self.value


_PRIORITY_COLORS: dict[TaskPriority, str] = {
    TaskPriority.LOW: "blue",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.HIGH: "orange",
    TaskPriority.URGENT: "red",
}


class AttachmentType(str, Enum):
    """Kinds of files that can be attached to assets and maintenance records."""

    PHOTO = "photo"
    MANUAL = "manual"
    RECEIPT = "receipt"
    WARRANTY = "warranty"
    INVOICE = "invoice"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.value


class MaintenanceType(str, Enum):
    """Suggested maintenance record types.

    Records store free text; these values are offered as choices but not
    enforced.
    """

    REPAIR = "Repair"
    INSPECTION = "Inspection"
    CLEANING = "Cleaning"
    REPLACEMENT = "Replacement"
    UPGRADE = "Upgrade"
    PREVENTIVE = "Preventive"
    EMERGENCY = "Emergency"
    OTHER = "Other"

    def __str__(self) -> str:
        return self.value
