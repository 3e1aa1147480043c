"""
Rollback Coordinator

Best-effort compensation for a failed creation saga. Compensations are
accumulated by the provisioner as resources are created and executed here
in reverse order, so a campaign is always removed before the budget it
references. Nothing in this module raises: every compensation failure is
logged and recorded on the returned report.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List

from .error_classifier import describe_error
from .models import PlatformCampaignStatus, ResourceKind
from .protocols import AdsPlatformProtocol, PlatformCallError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

# Budget removal failures that mean "a campaign still references it"
BUDGET_IN_USE_MARKERS = ("associated with", "in use")
BUDGET_IN_USE_CODES = ("IN_USE", "CANNOT_REMOVE_ASSOCIATED")


@dataclass(frozen=True)
class Compensation:
    """Undo action for one created resource"""
    kind: ResourceKind
    resource_name: str


@dataclass
class RollbackReport:
    """What a rollback run managed to clean up"""
    removed: List[Compensation] = field(default_factory=list)
    orphaned: List[Compensation] = field(default_factory=list)
    failed: List[Compensation] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.orphaned and not self.failed


def _budget_in_use(error: Exception) -> bool:
    text = describe_error(error).lower()
    if any(marker in text for marker in BUDGET_IN_USE_MARKERS):
        return True
    if isinstance(error, PlatformCallError):
        for raw in error.errors:
            if not isinstance(raw, dict):
                continue
            code = raw.get("errorCode") or raw.get("error_code") or {}
            values = [str(v) for v in code.values()] if isinstance(code, dict) else []
            if any(marker in value for value in values for marker in BUDGET_IN_USE_CODES):
                return True
    return False


class RollbackCoordinator:
    """Executes saga compensations in reverse creation order"""

    def __init__(
        self,
        platform: AdsPlatformProtocol,
        propagation_delay: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.platform = platform
        self.propagation_delay = propagation_delay
        self._sleep = sleep

    async def rollback(self, compensations: List[Compensation]) -> RollbackReport:
        """Undo every compensation, newest first. Never raises."""
        report = RollbackReport()
        if not compensations:
            return report

        logger.warning(f"[ROLLBACK] Starting rollback of {len(compensations)} resource(s)")
        campaign_removed = False

        for compensation in reversed(compensations):
            try:
                if compensation.kind == ResourceKind.CAMPAIGN:
                    if await self._remove_campaign(compensation.resource_name):
                        campaign_removed = True
                        report.removed.append(compensation)
                    else:
                        report.failed.append(compensation)
                elif compensation.kind == ResourceKind.BUDGET:
                    if campaign_removed and self.propagation_delay > 0:
                        logger.info(
                            f"[ROLLBACK] Waiting {self.propagation_delay}s for campaign removal to propagate"
                        )
                        await self._sleep(self.propagation_delay)
                    outcome = await self._remove_budget(compensation.resource_name)
                    getattr(report, outcome).append(compensation)
                else:
                    # Child resources go away with their campaign
                    logger.debug(f"[ROLLBACK] Skipping {compensation.kind.value} {compensation.resource_name}")
            except Exception as e:
                logger.error(
                    f"[ROLLBACK] Unexpected failure compensating {compensation.kind.value} "
                    f"{compensation.resource_name}: {e}"
                )
                report.failed.append(compensation)

        if report.complete:
            logger.info(f"[ROLLBACK] Completed, removed {len(report.removed)} resource(s)")
        else:
            logger.warning(
                f"[ROLLBACK] Finished with leftovers: {len(report.orphaned)} orphaned, "
                f"{len(report.failed)} failed"
            )
        return report

    async def _remove_campaign(self, resource_name: str) -> bool:
        try:
            await self.platform.remove_campaign(resource_name)
            logger.info(f"[ROLLBACK] Campaign removed: {resource_name}")
            return True
        except Exception as e:
            logger.warning(
                f"[ROLLBACK] Remove rejected for {resource_name} ({describe_error(e)}), "
                f"falling back to status update"
            )

        try:
            await self.platform.update_campaign(
                resource_name, {"status": PlatformCampaignStatus.REMOVED.value}
            )
            logger.info(f"[ROLLBACK] Campaign marked REMOVED: {resource_name}")
            return True
        except Exception as e:
            logger.error(f"[ROLLBACK] Could not remove campaign {resource_name}: {describe_error(e)}")
            return False

    async def _remove_budget(self, resource_name: str) -> str:
        """Returns the report bucket the budget belongs in"""
        try:
            await self.platform.remove_campaign_budget(resource_name)
            logger.info(f"[ROLLBACK] Budget removed: {resource_name}")
            return "removed"
        except Exception as e:
            if _budget_in_use(e):
                logger.warning(
                    f"[ROLLBACK] Budget {resource_name} still associated with a campaign, "
                    f"leaving it orphaned: {describe_error(e)}"
                )
                return "orphaned"
            logger.error(f"[ROLLBACK] Could not remove budget {resource_name}: {describe_error(e)}")
            return "failed"


__all__ = ["Compensation", "RollbackReport", "RollbackCoordinator"]
