"""winget services."""

from .classifier import OutputClassifier, WingetOperation
from .elevation import ElevationBridge
from .filters import filter_packages, sort_by_name
from .monitor import ConnectionMonitor, ConnectionStatus, StatusChange
from .parser import parse_package_list, parse_source_list, parse_upgrade_list
from .presets import WELL_KNOWN_SOURCES
from .runner import CommandOutput, ProcessRunner, resolve_winget_path
from .service import WingetService

__all__ = [
    "CommandOutput",
    "ConnectionMonitor",
    "ConnectionStatus",
    "ElevationBridge",
    "OutputClassifier",
    "ProcessRunner",
    "StatusChange",
    "WELL_KNOWN_SOURCES",
    "WingetOperation",
    "WingetService",
    "filter_packages",
    "parse_package_list",
    "parse_source_list",
    "parse_upgrade_list",
    "resolve_winget_path",
    "sort_by_name",
]
