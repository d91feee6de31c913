"""Data models for wingetctl."""

from wingetctl.models.config import AppConfig
from wingetctl.models.package import (
    OperationResult,
    Package,
    PackageSource,
    PackageStatus,
    SearchFilterType,
)

__all__ = [
    "AppConfig",
    "OperationResult",
    "Package",
    "PackageSource",
    "PackageStatus",
    "SearchFilterType",
]
