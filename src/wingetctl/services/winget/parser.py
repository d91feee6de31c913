"""Parsers for winget's console tables.

winget prints fixed-width tables whose column widths depend on the content and
the locale, preceded by banners and spinner frames::

    Name               Id                           Version   Source
    ---------------------------------------------------------------
    Visual Studio Code Microsoft.VisualStudioCode   1.85.1    winget

Rows are sliced at the character offsets of the header keywords. Rows that do
not line up with the header, and whole tables without a recognizable header,
are split on runs of two or more spaces instead. Neither path raises; a row
that yields no usable record is dropped.
"""

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import datetime

from wingetctl.logger import get_logger
from wingetctl.models.package import (
    DEFAULT_SOURCE_NAME,
    UNKNOWN_SOURCE_TYPE,
    UNKNOWN_VERSION,
    Package,
    PackageSource,
    PackageStatus,
)

logger = get_logger(__name__)

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
NEWLINE_RE = re.compile(r"\r\n|\r|\n")
FALLBACK_SPLIT_RE = re.compile(r"\s{2,}")
SEPARATOR_RE = re.compile(r"[-=\s]+")
ELLIPSIS = "…"
PROGRESS_BAR_CHARS = ("█", "▒")  # full block, medium shade
SPINNER_CHARS = ("\\", "/", "|")

RowCheck = Callable[[dict[str, str]], bool]


def _is_separator(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and SEPARATOR_RE.fullmatch(stripped) is not None


@dataclass(frozen=True)
class Column:
    """A table column: record field name and the header keyword that labels it."""

    field: str
    keyword: str

    @property
    def pattern(self) -> re.Pattern[str]:
        return re.compile(rf"(?<!\w){re.escape(self.keyword)}(?!\w)", re.IGNORECASE)


PACKAGE_COLUMNS = (
    Column("name", "Name"),
    Column("id", "Id"),
    Column("version", "Version"),
    Column("available", "Available"),
    Column("match", "Match"),
    Column("source", "Source"),
)

SOURCE_COLUMNS = (
    Column("name", "Name"),
    Column("argument", "Argument"),
    Column("type", "Type"),
    Column("explicit", "Explicit"),
    Column("data", "Data"),
)


@dataclass(frozen=True)
class TableLayout:
    """Columns located in a header line, as (field, offset) pairs in declared order."""

    offsets: tuple[tuple[str, int], ...]

    @property
    def sliceable(self) -> bool:
        starts = [offset for _, offset in self.offsets]
        return all(a < b for a, b in zip(starts, starts[1:]))

    @property
    def field_order(self) -> list[str]:
        """Fields left to right as they appear on screen."""
        return [field for field, _ in sorted(self.offsets, key=lambda item: item[1])]


class TableParser:
    """Turns one kind of winget table into a list of ``{field: text}`` rows."""

    def __init__(self, columns: tuple[Column, ...], skip_spinner_lines: bool = True) -> None:
        self.columns = columns
        # Source arguments are URLs, so '/' cannot mark a spinner frame there
        self.skip_spinner_lines = skip_spinner_lines
        self._patterns = [(column.field, column.pattern) for column in columns]

    @property
    def default_order(self) -> list[str]:
        return [column.field for column in self.columns]

    def detect_header(self, line: str) -> TableLayout | None:
        """Return the column layout if ``line`` is a header.

        A header names the first column plus at least one other, each as a
        whole word in any case.
        """
        found: list[tuple[str, int]] = []
        for field, pattern in self._patterns:
            match = pattern.search(line)
            if match:
                found.append((field, match.start()))
        if len(found) < 2 or found[0][0] != self.columns[0].field:
            return None
        return TableLayout(tuple(found))

    def is_noise(self, line: str) -> bool:
        stripped = line.strip()
        if not stripped:
            return True
        if _is_separator(line):
            return True
        if stripped.startswith("-"):
            return True
        if any(ch in line for ch in PROGRESS_BAR_CHARS):
            return True
        return self.skip_spinner_lines and any(ch in line for ch in SPINNER_CHARS)

    def slice_row(self, line: str, layout: TableLayout) -> dict[str, str] | None:
        """Cut ``line`` at the header offsets, or None if the row does not line up."""
        ordered = sorted(layout.offsets, key=lambda item: item[1])
        row: dict[str, str] = {}
        for index, (field, start) in enumerate(ordered):
            if 0 < start < len(line) and not line[start - 1].isspace():
                return None
            end = ordered[index + 1][1] if index + 1 < len(ordered) else None
            row[field] = line[start:end].strip()
        return row

    def split_row(self, line: str, layout: TableLayout | None) -> dict[str, str]:
        tokens = [token for token in FALLBACK_SPLIT_RE.split(line.strip()) if token]
        fields = layout.field_order if layout else self.default_order
        return dict(zip(fields, tokens))

    def iter_rows(self, text: str, validate: RowCheck | None = None) -> Iterator[dict[str, str]]:
        """Yield raw rows from ``text``.

        Args:
            text: Console output, banners and spinner frames included
            validate: Extra check a sliced row must pass; failing rows are re-split
        """
        if not text:
            return

        lines = NEWLINE_RE.split(ANSI_ESCAPE_RE.sub("", text))

        layout: TableLayout | None = None
        start = 0
        for index, line in enumerate(lines):
            layout = self.detect_header(line)
            if layout:
                start = index
                break

        headerless = layout is None
        fallbacks = 0

        for index in range(start, len(lines)):
            line = lines[index]
            # Later tables repeat the header with a separator underneath; data rows never have one
            underlined = index + 1 < len(lines) and _is_separator(lines[index + 1])
            header = self.detect_header(line) if index == start or underlined else None
            if header:
                layout = header
                continue
            if self.is_noise(line):
                continue

            row = None
            if layout and layout.sliceable:
                row = self.slice_row(line, layout)
                if row is not None and validate is not None and not validate(row):
                    row = None
            if row is None:
                fallbacks += 1
                row = self.split_row(line, layout)
                if len(row) < 2:
                    continue
            yield row

        if fallbacks:
            logger.debug(f"Whitespace fallback used for {fallbacks} row(s)", headerless=headerless)


_package_table = TableParser(PACKAGE_COLUMNS)
_source_table = TableParser(SOURCE_COLUMNS, skip_spinner_lines=False)


def _package_id_ok(row: dict[str, str]) -> bool:
    # A sliced id with inner whitespace usually means the row was cut wrongly, so re-split it.
    # Ids that still contain whitespace after the split (e.g. "Steam App 730") are kept.
    package_id = row.get("id", "")
    return bool(package_id) and not any(ch.isspace() for ch in package_id)


def _build_packages(text: str, status: PackageStatus, upgrade: bool) -> list[Package]:
    observed_at = datetime.now()
    packages: list[Package] = []

    for row in _package_table.iter_rows(text, validate=_package_id_ok):
        name = row.get("name", "").strip()
        package_id = row.get("id", "").strip()
        if not name or not package_id:
            continue

        version = row.get("version", "").strip() or UNKNOWN_VERSION
        available = row.get("available", "").strip()
        if upgrade and not available:
            # Unparsable available version, not "no update"
            available = version

        packages.append(
            Package(
                id=package_id,
                name=name,
                version=version,
                available_version=available or None,
                source=row.get("source", "").strip() or DEFAULT_SOURCE_NAME,
                status=status,
                last_updated=observed_at,
            )
        )

    return packages


def parse_package_list(text: str, status: PackageStatus = PackageStatus.INSTALLED) -> list[Package]:
    """Parse ``winget list`` / ``winget search`` output."""
    return _build_packages(text, status, upgrade=False)


def parse_upgrade_list(text: str) -> list[Package]:
    """Parse ``winget upgrade`` output; every record is tagged update-available."""
    return _build_packages(text, PackageStatus.UPDATE_AVAILABLE, upgrade=True)


def parse_source_list(text: str) -> list[PackageSource]:
    """Parse ``winget source list`` output."""
    sources: list[PackageSource] = []

    for row in _source_table.iter_rows(text):
        name = row.get("name", "").strip()
        if not name:
            continue

        argument = row.get("argument", "").strip().rstrip(ELLIPSIS).rstrip()
        sources.append(
            PackageSource(
                name=name,
                argument=argument,
                type=row.get("type", "").strip() or UNKNOWN_SOURCE_TYPE,
                data=row.get("data", "").strip(),
                explicit=row.get("explicit", "").strip().lower() == "true",
            )
        )

    return sources
