"""Composition root: builds the winget components from configuration."""

from dataclasses import dataclass

from wingetctl.config import get_config
from wingetctl.logger import get_logger
from wingetctl.models.config import AppConfig
from wingetctl.services.winget import (
    ConnectionMonitor,
    ElevationBridge,
    OutputClassifier,
    ProcessRunner,
    WingetService,
)

logger = get_logger(__name__)


@dataclass
class Services:
    """Process-wide components shared by every caller."""

    runner: ProcessRunner
    winget: WingetService
    monitor: ConnectionMonitor


def create_services(config: AppConfig | None = None) -> Services:
    """Wire the runner, elevation bridge, classifier, facade and monitor.

    Args:
        config: Configuration to use; the global configuration when omitted
    """
    config = config or get_config()

    runner = ProcessRunner(executable=config.winget.executable, probe_timeout=config.winget.probe_timeout)
    service = WingetService(
        runner,
        elevation=ElevationBridge(runner),
        classifier=OutputClassifier(config.classifier.extra_success_phrases),
        query_timeout=config.winget.query_timeout,
    )
    monitor = ConnectionMonitor(runner, probe_timeout=config.winget.probe_timeout)

    logger.debug("winget services created", executable=runner.executable)
    return Services(runner=runner, winget=service, monitor=monitor)
