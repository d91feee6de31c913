"""Public operations on winget: package queries, package changes and source management."""

from collections.abc import Sequence

from wingetctl.logger import get_logger
from wingetctl.models.package import OperationResult, Package, PackageSource, PackageStatus, SearchFilterType
from wingetctl.services.winget.classifier import OutputClassifier, WingetOperation
from wingetctl.services.winget.elevation import ElevationBridge, is_elevation_failure
from wingetctl.services.winget.filters import filter_packages
from wingetctl.services.winget.parser import parse_package_list, parse_source_list, parse_upgrade_list
from wingetctl.services.winget.presets import WELL_KNOWN_SOURCES
from wingetctl.services.winget.runner import CommandOutput, ProcessRunner

logger = get_logger(__name__)

ACCEPT_PACKAGE_AGREEMENTS = "--accept-package-agreements"
ACCEPT_SOURCE_AGREEMENTS = "--accept-source-agreements"
SILENT_FLAGS = ("--silent", "--disable-interactivity")


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class WingetService:
    """Runs winget commands and turns their output into records and results.

    Read operations never raise; they log the fault and return an empty list.
    Mutating operations never raise; every path ends in an ``OperationResult``.
    Source changes go through the elevation bridge, which only prompts when the
    process is not already elevated.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        elevation: ElevationBridge | None = None,
        classifier: OutputClassifier | None = None,
        query_timeout: float | None = None,
    ) -> None:
        """
        Args:
            runner: Launches winget
            elevation: Used for source add/remove/update/reset; built from
                ``runner`` when omitted
            classifier: Success phrase table for mutating operations
            query_timeout: Seconds to wait for list/search/source list
        """
        self._runner = runner
        self._elevation = elevation or ElevationBridge(runner)
        self._classifier = classifier or OutputClassifier()
        self.query_timeout = query_timeout

    # Queries

    async def _query(self, args: Sequence[str]) -> str:
        output = await self._runner.run(args, timeout=self.query_timeout)
        return output.text

    async def get_installed_packages(self) -> list[Package]:
        """List installed packages (``winget list``)."""
        try:
            return parse_package_list(await self._query(["list"]), PackageStatus.INSTALLED)
        except Exception as e:
            logger.error(f"Error getting installed packages: {e}")
            return []

    async def get_upgradable_packages(self) -> list[Package]:
        """List packages with a newer version available (``winget upgrade``)."""
        try:
            return parse_upgrade_list(await self._query(["upgrade"]))
        except Exception as e:
            logger.error(f"Error getting upgradable packages: {e}")
            return []

    async def search_packages(self, query: str) -> list[Package]:
        """Search the configured sources (``winget search <query>``)."""
        try:
            packages = parse_package_list(await self._query(["search", query]), PackageStatus.AVAILABLE)
        except Exception as e:
            logger.error(f"Error searching packages: {e}", query=query)
            return []
        logger.debug(f"Search for '{query}': found {len(packages)} packages")
        return packages

    async def search_packages_advanced(
        self,
        query: str,
        filter_type: SearchFilterType = SearchFilterType.BOTH,
        exact_match: bool = False,
    ) -> list[Package]:
        """Search, then keep only results whose name and/or id match ``query``."""
        results = await self.search_packages(query)
        filtered = filter_packages(results, query, filter_type, exact=exact_match)
        logger.debug(
            f"Advanced search '{query}': {len(filtered)} results after filtering",
            filter_type=filter_type.value,
            exact=exact_match,
        )
        return filtered

    async def get_package_sources(self) -> list[PackageSource]:
        """List registered sources (``winget source list``)."""
        try:
            return parse_source_list(await self._query(["source", "list"]))
        except Exception as e:
            logger.error(f"Error getting package sources: {e}")
            return []

    async def check_available(self) -> bool:
        """Whether winget can be started and answers ``--version``."""
        return await self._runner.probe()

    # Package changes

    def _classify(
        self,
        operation: WingetOperation,
        output: CommandOutput,
        success_message: str,
        failure_label: str,
    ) -> OperationResult:
        if is_elevation_failure(output.text):
            return OperationResult.fail(output.text, exit_code=output.exit_code, output=output.text)
        if self._classifier.is_success(operation, output.text):
            return OperationResult.ok(success_message, output=output.text, exit_code=output.exit_code)
        return OperationResult.fail(
            f"{failure_label}. Output: {output.text.strip()}",
            exit_code=output.exit_code,
            output=output.text,
        )

    async def _change_package(
        self,
        operation: WingetOperation,
        args: list[str],
        silent: bool,
        success_message: str,
        failure_label: str,
        error_label: str,
    ) -> OperationResult:
        if silent:
            args.extend(SILENT_FLAGS)
        try:
            output = await self._runner.run(args)
        except Exception as e:
            logger.error(f"{error_label}: {e}", args=args)
            return OperationResult.fail(f"{error_label}: {e}")
        return self._classify(operation, output, success_message, failure_label)

    async def install_package(self, package_id: str, silent: bool = False) -> OperationResult:
        if _blank(package_id):
            return OperationResult.fail("Package id is required")
        args = ["install", "--id", package_id, ACCEPT_PACKAGE_AGREEMENTS, ACCEPT_SOURCE_AGREEMENTS]
        return await self._change_package(
            WingetOperation.INSTALL,
            args,
            silent,
            success_message=f"Package {package_id} installed successfully",
            failure_label="Installation may have failed",
            error_label="Installation failed",
        )

    async def update_package(self, package_id: str, silent: bool = False) -> OperationResult:
        if _blank(package_id):
            return OperationResult.fail("Package id is required")
        args = ["upgrade", "--id", package_id, ACCEPT_PACKAGE_AGREEMENTS, ACCEPT_SOURCE_AGREEMENTS]
        return await self._change_package(
            WingetOperation.UPDATE,
            args,
            silent,
            success_message=f"Package {package_id} updated successfully",
            failure_label="Update may have failed",
            error_label="Update failed",
        )

    async def uninstall_package(self, package_id: str, silent: bool = False) -> OperationResult:
        if _blank(package_id):
            return OperationResult.fail("Package id is required")
        args = ["uninstall", "--id", package_id, ACCEPT_SOURCE_AGREEMENTS]
        return await self._change_package(
            WingetOperation.UNINSTALL,
            args,
            silent,
            success_message=f"Package {package_id} uninstalled successfully",
            failure_label="Uninstall may have failed",
            error_label="Uninstall failed",
        )

    # Source management

    async def _change_source(
        self,
        operation: WingetOperation,
        args: list[str],
        success_message: str,
        failure_label: str,
    ) -> OperationResult:
        try:
            output = await self._elevation.run(args)
        except Exception as e:
            logger.error(f"{failure_label}: {e}", args=args)
            return OperationResult.fail(f"{failure_label}: {e}")
        return self._classify(operation, output, success_message, failure_label)

    async def add_source(self, name: str, url: str, source_type: str = "") -> OperationResult:
        """Register a source, then refresh it so its packages are searchable right away."""
        if _blank(name):
            return OperationResult.fail("Source name is required")
        if _blank(url):
            return OperationResult.fail("Source URL/argument is required")

        args = ["source", "add", "--name", name, "--arg", url, ACCEPT_SOURCE_AGREEMENTS]
        if not _blank(source_type):
            args.extend(["--type", source_type])

        result = await self._change_source(
            WingetOperation.SOURCE_ADD,
            args,
            success_message=f"Source '{name}' added successfully",
            failure_label="Failed to add source",
        )
        if result.success:
            refresh = await self.update_source(name)
            if not refresh.success:
                logger.warning(f"Source '{name}' added but refresh failed: {refresh.error_message}")
        return result

    async def remove_source(self, name: str) -> OperationResult:
        if _blank(name):
            return OperationResult.fail("Source name is required")
        return await self._change_source(
            WingetOperation.SOURCE_REMOVE,
            ["source", "remove", "--name", name],
            success_message=f"Source '{name}' removed successfully",
            failure_label="Failed to remove source",
        )

    async def update_source(self, name: str) -> OperationResult:
        """Refresh a source's package index."""
        if _blank(name):
            return OperationResult.fail("Source name is required")
        return await self._change_source(
            WingetOperation.SOURCE_UPDATE,
            ["source", "update", "--name", name],
            success_message=f"Source '{name}' updated successfully",
            failure_label="Failed to update source",
        )

    async def reset_source(self, name: str) -> OperationResult:
        """Reset a source to its default settings."""
        if _blank(name):
            return OperationResult.fail("Source name is required")
        return await self._change_source(
            WingetOperation.SOURCE_RESET,
            ["source", "reset", "--name", name],
            success_message=f"Source '{name}' reset successfully",
            failure_label="Failed to reset source",
        )

    async def edit_source(self, current_name: str, name: str, url: str, source_type: str = "") -> OperationResult:
        """Change a source's definition.

        winget cannot edit a source in place, so the old one is removed and the
        new definition added. A failed removal is returned without adding.
        """
        if _blank(current_name) or _blank(name):
            return OperationResult.fail("Source name is required")
        if _blank(url):
            return OperationResult.fail("Source URL/argument is required")

        removed = await self.remove_source(current_name)
        if not removed.success:
            return removed
        return await self.add_source(name, url, source_type)

    async def add_well_known_source(self, key: str) -> OperationResult:
        preset = WELL_KNOWN_SOURCES.get(key)
        if preset is None:
            return OperationResult.fail(f"Unknown source preset: {key}")
        return await self.add_source(preset.name, preset.argument, preset.type)
