"""Decides whether a mutating winget command succeeded from its text output.

winget does not report a machine-readable status on every path, so success is
recognized by phrases it prints. All phrase matching lives here.
"""

from collections.abc import Mapping, Sequence
from enum import Enum

from wingetctl.logger import get_logger

logger = get_logger(__name__)


class WingetOperation(str, Enum):
    INSTALL = "install"
    UPDATE = "update"
    UNINSTALL = "uninstall"
    SOURCE_ADD = "source_add"
    SOURCE_REMOVE = "source_remove"
    SOURCE_UPDATE = "source_update"
    SOURCE_RESET = "source_reset"


# Case-sensitive substrings, as winget prints them.
# "already installed" and "already the latest" count as success.
SUCCESS_PHRASES: dict[WingetOperation, tuple[str, ...]] = {
    WingetOperation.INSTALL: ("Successfully installed", "already installed"),
    WingetOperation.UPDATE: ("Successfully installed", "already the latest"),
    WingetOperation.UNINSTALL: ("Successfully uninstalled",),
    WingetOperation.SOURCE_ADD: ("successfully", "added"),
    WingetOperation.SOURCE_REMOVE: ("successfully", "removed"),
    WingetOperation.SOURCE_UPDATE: ("successfully", "updated"),
    WingetOperation.SOURCE_RESET: ("successfully", "reset"),
}


class OutputClassifier:
    """Phrase table per operation, optionally extended (e.g. for localized winget builds)."""

    def __init__(self, extra_phrases: Mapping[str, Sequence[str]] | None = None) -> None:
        self._phrases: dict[WingetOperation, tuple[str, ...]] = dict(SUCCESS_PHRASES)
        for key, phrases in (extra_phrases or {}).items():
            try:
                operation = WingetOperation(key)
            except ValueError:
                logger.warning(f"Ignoring success phrases for unknown operation: {key}")
                continue
            self._phrases[operation] = self._phrases[operation] + tuple(p for p in phrases if p)

    def phrases(self, operation: WingetOperation) -> tuple[str, ...]:
        return self._phrases[operation]

    def is_success(self, operation: WingetOperation, output: str) -> bool:
        return any(phrase in output for phrase in self._phrases[operation])
