"""Presentation-state holders for the app's screens."""

from homemaint.viewmodels.asset_detail import AssetDetailViewModel
from homemaint.viewmodels.asset_list import AssetListViewModel
from homemaint.viewmodels.base import ViewModel
from homemaint.viewmodels.dashboard import DashboardViewModel
from homemaint.viewmodels.maintenance_records import MaintenanceRecordListViewModel
from homemaint.viewmodels.service_providers import ServiceProviderListViewModel
from homemaint.viewmodels.task_list import TaskFilter, TaskListViewModel

__all__ = [
    "AssetDetailViewModel",
    "AssetListViewModel",
    "DashboardViewModel",
    "MaintenanceRecordListViewModel",
    "ServiceProviderListViewModel",
    "TaskFilter",
    "TaskListViewModel",
    "ViewModel",
]
