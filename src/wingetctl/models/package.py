"""Package, source and operation result models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_SOURCE_NAME = "winget"
UNKNOWN_VERSION = "Unknown"
UNKNOWN_SOURCE_TYPE = "Unknown"


class PackageStatus(str, Enum):
    """Lifecycle state of a package as seen by the caller."""

    UNKNOWN = "unknown"
    INSTALLED = "installed"
    AVAILABLE = "available"
    UPDATE_AVAILABLE = "update_available"
    INSTALLING = "installing"
    UPDATING = "updating"
    REMOVING = "removing"


class SearchFilterType(str, Enum):
    """Which package field(s) a search filter inspects."""

    NAME = "name"
    ID = "id"
    BOTH = "both"


class Package(BaseModel):
    """A package row parsed from winget output.

    Records are rebuilt on every query and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    version: str = UNKNOWN_VERSION
    available_version: str | None = None
    publisher: str = ""
    source: str = DEFAULT_SOURCE_NAME
    status: PackageStatus = PackageStatus.UNKNOWN
    last_updated: datetime = Field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.name} ({self.id}) - v{self.version}"


class PackageSource(BaseModel):
    """A package repository registered with winget."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    argument: str = ""
    type: str = UNKNOWN_SOURCE_TYPE
    data: str = ""
    explicit: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def identifier(self) -> str:
        """Sources are identified by name only."""
        return self.name

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_default(self) -> bool:
        """True for the built-in ``winget`` source."""
        return self.name.casefold() == DEFAULT_SOURCE_NAME

    def __str__(self) -> str:
        return f"{self.name} ({self.type})"


class OperationResult(BaseModel):
    """Uniform outcome of a mutating winget operation.

    Use :meth:`ok` and :meth:`fail` rather than the constructor so the narrative
    lands in ``message`` for successes and in ``error_message`` for failures.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = False
    message: str = ""
    error_message: str = ""
    exit_code: int | None = None
    output: str = ""

    @classmethod
    def ok(
        cls,
        message: str = "Operation completed successfully",
        output: str = "",
        exit_code: int | None = None,
    ) -> "OperationResult":
        return cls(success=True, message=message, output=output, exit_code=exit_code)

    @classmethod
    def fail(cls, error_message: str, exit_code: int | None = None, output: str = "") -> "OperationResult":
        return cls(success=False, error_message=error_message, exit_code=exit_code, output=output)
