"""
Campaign Provisioner

Runs the five-step creation saga against the advertising platform:

    START -> BUDGET_CREATED -> CAMPAIGN_CREATED -> AD_GROUP_CREATED
          -> KEYWORDS_ADDED -> AD_CREATED

Steps are strictly sequential. Every created budget and campaign is pushed
onto a compensation list; on any failure the RollbackCoordinator undoes
them (campaign first) and the classified platform error is raised.
Ad group, keyword and ad failures need no compensation of their own since
removing the campaign removes its children.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, List, Optional

from core.config import CampaignDefaults

from .error_classifier import classify_error
from .models import (
    CampaignResult,
    CampaignSpec,
    PlatformCampaignStatus,
    ProvisioningStep,
    ResourceKind,
)
from .protocols import (
    AdsPlatformProtocol,
    CampaignProvisioningError,
    CampaignValidationError,
)
from .rollback import Compensation, RollbackCoordinator

logger = logging.getLogger(__name__)

TOTAL_STEPS = 5

# Platform limits
MAX_NAME_LENGTH = 100
MIN_BUDGET_MICROS = 1_000_000
MIN_CPC_BID_MICROS = 10_000
MIN_HEADLINES = 3
MIN_DESCRIPTIONS = 2
HEADLINE_MAX_CHARS = 30
DESCRIPTION_MAX_CHARS = 90

EU_POLITICAL_ADVERTISING = "DOES_NOT_CONTAIN_EU_POLITICAL_ADVERTISING"

_URL_PATTERN = re.compile(r"^https?://\S+$")


def resource_id(resource_name: str) -> str:
    """Trailing path segment of a resource name, e.g. customers/1/campaigns/42 -> 42"""
    return resource_name.rstrip("/").rsplit("/", 1)[-1]


def platform_date(value: datetime) -> str:
    return value.strftime("%Y%m%d")


def unique_keywords(keywords: List[str]) -> List[str]:
    """Strip, drop blanks and case-insensitive duplicates, keep first spelling"""
    seen = set()
    result = []
    for keyword in keywords:
        text = (keyword or "").strip()
        if text and text.lower() not in seen:
            seen.add(text.lower())
            result.append(text)
    return result


class CampaignProvisioner:
    """Creates a complete search campaign or nothing at all"""

    def __init__(
        self,
        platform: AdsPlatformProtocol,
        rollback: RollbackCoordinator,
        defaults: Optional[CampaignDefaults] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.platform = platform
        self.rollback = rollback
        self.defaults = defaults or CampaignDefaults()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ====================
    # Validation
    # ====================

    def _validate_spec(self, spec: CampaignSpec) -> List[str]:
        """Reject a bad spec before any platform call; returns the clean keyword list"""
        if not spec.name or not spec.name.strip():
            raise CampaignValidationError("Campaign name is required", field="name")
        if len(spec.name) > MAX_NAME_LENGTH:
            raise CampaignValidationError(
                f"Campaign name must be at most {MAX_NAME_LENGTH} characters", field="name"
            )
        if spec.budget_micros < MIN_BUDGET_MICROS:
            raise CampaignValidationError(
                f"Budget must be at least {MIN_BUDGET_MICROS} micros", field="budget_micros"
            )
        if spec.cpc_bid_micros is not None and spec.cpc_bid_micros < MIN_CPC_BID_MICROS:
            raise CampaignValidationError(
                f"CPC bid must be at least {MIN_CPC_BID_MICROS} micros", field="cpc_bid_micros"
            )
        if spec.end_date <= spec.start_date:
            raise CampaignValidationError("End date must be after start date", field="end_date")
        if not _URL_PATTERN.match(spec.final_url or ""):
            raise CampaignValidationError("Final URL must be an http(s) URL", field="final_url")

        keywords = unique_keywords(spec.keywords)
        if not keywords:
            raise CampaignValidationError("At least one keyword is required", field="keywords")

        headlines = [h for h in spec.headlines if h and h.strip()]
        if len(headlines) < MIN_HEADLINES:
            raise CampaignValidationError(
                f"At least {MIN_HEADLINES} headlines are required", field="headlines"
            )
        descriptions = [d for d in spec.descriptions if d and d.strip()]
        if len(descriptions) < MIN_DESCRIPTIONS:
            raise CampaignValidationError(
                f"At least {MIN_DESCRIPTIONS} descriptions are required", field="descriptions"
            )
        return keywords

    # ====================
    # Saga
    # ====================

    async def provision(self, spec: CampaignSpec) -> CampaignResult:
        """Run the creation saga.

        Raises:
            CampaignValidationError: spec rejected, nothing was created
            CampaignProvisioningError: a platform step failed; rollback has already run
        """
        keywords = self._validate_spec(spec)
        cpc_bid_micros = spec.cpc_bid_micros or self.defaults.cpc_bid_micros
        initial_status = PlatformCampaignStatus(self.defaults.initial_status)

        step = ProvisioningStep.START
        compensations: List[Compensation] = []

        logger.info(f"Provisioning campaign '{spec.name}' with {len(keywords)} keyword(s)")

        try:
            logger.info(f"[STEP 1/{TOTAL_STEPS}] Creating campaign budget")
            budget_name = f"Budget: {spec.name} ({int(self._clock().timestamp() * 1000)})"
            budget_resource = await self.platform.create_campaign_budget({
                "name": budget_name,
                "amountMicros": str(spec.budget_micros),
                "deliveryMethod": "STANDARD",
            })
            compensations.append(Compensation(ResourceKind.BUDGET, budget_resource))
            step = ProvisioningStep.BUDGET_CREATED
            logger.info(f"[STEP 1/{TOTAL_STEPS}] Budget created: {budget_resource}")

            logger.info(f"[STEP 2/{TOTAL_STEPS}] Creating campaign ({initial_status.value})")
            campaign_resource = await self.platform.create_campaign({
                "name": spec.name,
                "advertisingChannelType": "SEARCH",
                "status": initial_status.value,
                "campaignBudget": budget_resource,
                "manualCpc": {"enhancedCpcEnabled": False},
                "networkSettings": {
                    "targetGoogleSearch": True,
                    "targetSearchNetwork": False,
                    "targetContentNetwork": False,
                },
                "startDate": platform_date(spec.start_date),
                "endDate": platform_date(spec.end_date),
                "containsEuPoliticalAdvertising": EU_POLITICAL_ADVERTISING,
            })
            compensations.append(Compensation(ResourceKind.CAMPAIGN, campaign_resource))
            step = ProvisioningStep.CAMPAIGN_CREATED
            logger.info(f"[STEP 2/{TOTAL_STEPS}] Campaign created: {campaign_resource}")

            logger.info(f"[STEP 3/{TOTAL_STEPS}] Creating ad group")
            ad_group_resource = await self.platform.create_ad_group({
                "name": f"AG: {spec.name}",
                "campaign": campaign_resource,
                "status": "ENABLED",
                "type": "SEARCH_STANDARD",
                "cpcBidMicros": str(cpc_bid_micros),
            })
            step = ProvisioningStep.AD_GROUP_CREATED
            logger.info(f"[STEP 3/{TOTAL_STEPS}] Ad group created: {ad_group_resource}")

            logger.info(f"[STEP 4/{TOTAL_STEPS}] Adding {len(keywords)} keyword(s)")
            await self.platform.create_ad_group_criteria([
                {
                    "adGroup": ad_group_resource,
                    "status": "ENABLED",
                    "keyword": {"text": keyword, "matchType": "BROAD"},
                }
                for keyword in keywords
            ])
            step = ProvisioningStep.KEYWORDS_ADDED
            logger.info(f"[STEP 4/{TOTAL_STEPS}] Keywords added")

            logger.info(f"[STEP 5/{TOTAL_STEPS}] Creating responsive search ad")
            await self.platform.create_ad_group_ad({
                "adGroup": ad_group_resource,
                "status": "ENABLED",
                "ad": {
                    "responsiveSearchAd": {
                        "headlines": [
                            {"text": h[:HEADLINE_MAX_CHARS]} for h in spec.headlines if h and h.strip()
                        ],
                        "descriptions": [
                            {"text": d[:DESCRIPTION_MAX_CHARS]} for d in spec.descriptions if d and d.strip()
                        ],
                    },
                    "finalUrls": [spec.final_url],
                },
            })
            step = ProvisioningStep.AD_CREATED
            logger.info(f"[STEP 5/{TOTAL_STEPS}] Ad created")

        except Exception as error:
            classified = classify_error(error)
            logger.error(
                f"Provisioning of '{spec.name}' {step.value} -> {ProvisioningStep.FAILED.value}: "
                f"[{classified.category.value}] {classified.message}"
            )
            if compensations:
                await self.rollback.rollback(compensations)
            else:
                logger.info("Nothing was created, skipping rollback")
            raise CampaignProvisioningError(classified, last_completed_step=step) from error

        result = CampaignResult(
            campaign_id=resource_id(campaign_resource),
            ad_group_id=resource_id(ad_group_resource),
            status=initial_status,
            resource_name=campaign_resource,
        )
        logger.info(f"Campaign provisioned: {result.campaign_id} ({result.resource_name})")
        return result


__all__ = ["CampaignProvisioner", "resource_id", "platform_date", "unique_keywords"]
