"""
Exclusion applier.

For one matching row: resolve campaign -> ad group, exclude the placement on
the ad group, then append the url to the shared exclusion list. Every failure
is contained to the row.
"""

from datetime import datetime, timezone

from core.exclude.config import ExclusionConfig
from core.exclude.exclusion_lists import ExclusionListResolver
from core.exclude.host import PlacementHost
from core.exclude.report import PlacementRow

STATUS_SUCCESS = "SUCCESS"
STATUS_CAMPAIGN_NOT_FOUND = "CAMPAIGN_NOT_FOUND"
STATUS_AD_GROUP_NOT_FOUND = "AD_GROUP_NOT_FOUND"
STATUS_FAILED = "FAILED"


class ExclusionApplier:
    def __init__(self, host: PlacementHost, resolver: ExclusionListResolver, config: ExclusionConfig):
        self.host = host
        self.resolver = resolver
        self.config = config

    def apply(self, row: PlacementRow) -> dict:
        """Exclude one placement. Returns a result dict; never raises."""
        result = {
            "url": row.url,
            "campaign_id": row.campaign_id,
            "ad_group_id": row.ad_group_id,
            "status": "PENDING",
            "error": None,
            "executed_at": None,
        }

        try:
            result["status"] = self._apply(row)
        except Exception as e:
            result["status"] = STATUS_FAILED
            result["error"] = str(e)
            print(f"  ERROR: Error excluding placement {row.url}: {e}")

        result["executed_at"] = datetime.now(timezone.utc).isoformat()
        return result

    def _apply(self, row: PlacementRow) -> str:
        campaign = self.host.resolve_campaign(row.campaign_id)
        if campaign is None:
            print(f"  Campaign not found: {row.campaign_id}")
            return STATUS_CAMPAIGN_NOT_FOUND

        ad_group = self.host.resolve_ad_group(campaign.campaign_id, row.ad_group_id)
        if ad_group is None:
            print(f"  Ad group not found: {row.ad_group_id}")
            return STATUS_AD_GROUP_NOT_FOUND

        self.host.exclude_placement(ad_group, row.url)

        exclusion_list = self.resolver.get_or_create(self.config.exclusions_list)
        self.host.add_to_list(exclusion_list, row.url)
        if self.config.log:
            print(f"  Added placement to exclusion list: {row.url}")

        return STATUS_SUCCESS
