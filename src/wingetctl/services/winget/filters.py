"""Client-side filtering of parsed package lists."""

from collections.abc import Iterable

from wingetctl.models.package import Package, SearchFilterType


def _fields(package: Package, filter_type: SearchFilterType) -> tuple[str, ...]:
    if filter_type == SearchFilterType.NAME:
        return (package.name,)
    if filter_type == SearchFilterType.ID:
        return (package.id,)
    return (package.name, package.id)


def matches(package: Package, query: str, filter_type: SearchFilterType, exact: bool = False) -> bool:
    """Case-insensitive match of ``query`` against the fields ``filter_type`` selects.

    An empty query matches every package in partial mode.
    """
    needle = query.casefold()
    for value in _fields(package, filter_type):
        candidate = value.casefold()
        if (candidate == needle) if exact else (needle in candidate):
            return True
    return False


def filter_packages(
    packages: Iterable[Package],
    query: str,
    filter_type: SearchFilterType = SearchFilterType.BOTH,
    exact: bool = False,
) -> list[Package]:
    """Keep the packages matching ``query``, in their original order."""
    return [package for package in packages if matches(package, query, filter_type, exact)]


def sort_by_name(packages: Iterable[Package]) -> list[Package]:
    return sorted(packages, key=lambda package: package.name.casefold())
