"""Utilities for wingetctl."""

from wingetctl.utils.privilege import PrivilegeHelper, is_elevated
from wingetctl.utils.subprocess_executor import SubprocessExecutor

__all__ = ["PrivilegeHelper", "SubprocessExecutor", "is_elevated"]
