"""
Host platform access for placement exclusions.

The job only needs a narrow set of capabilities from the ad platform.
PlacementHost names them; GoogleAdsPlacementHost implements them over the
Google Ads REST API. Tests use an in-memory fake of the same shape.
"""

from dataclasses import dataclass
from typing import Iterator, NewType, Optional, Protocol

from core.exclude.ads_client import GoogleAdsClient

CampaignId = NewType("CampaignId", str)
AdGroupId = NewType("AdGroupId", str)

MOBILE_APP_PREFIX = "mobileapp::"
DRY_RUN_LIST_ID = "dry_run_list_id"


@dataclass(frozen=True)
class Campaign:
    campaign_id: CampaignId
    name: str = ""
    resource_name: Optional[str] = None


@dataclass(frozen=True)
class AdGroup:
    ad_group_id: AdGroupId
    campaign_id: CampaignId
    name: str = ""
    resource_name: Optional[str] = None


@dataclass(frozen=True)
class ExclusionList:
    list_id: str
    name: str
    resource_name: Optional[str] = None


class PlacementHost(Protocol):
    def account_time_zone(self) -> Optional[str]: ...

    def iter_report(self, query: str) -> Iterator[dict]: ...

    def resolve_campaign(self, campaign_id: CampaignId) -> Optional[Campaign]: ...

    def resolve_ad_group(self, campaign_id: CampaignId, ad_group_id: AdGroupId) -> Optional[AdGroup]: ...

    def find_exclusion_list(self, name: str) -> Optional[ExclusionList]: ...

    def create_exclusion_list(self, name: str) -> ExclusionList: ...

    def exclude_placement(self, ad_group: AdGroup, url: str) -> None: ...

    def add_to_list(self, exclusion_list: ExclusionList, url: str) -> None: ...


# =============================================================================
# HELPERS
# =============================================================================


def gaql_string(value: str) -> str:
    """Quote a value for use as a GAQL string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def gaql_id(value) -> str:
    """Numeric ids only; anything else is rejected before it reaches a query."""
    text = str(value).strip()
    if not text.isdigit():
        raise ValueError(f"Invalid id: {value!r}")
    return text


def extract_id(resource_name: str) -> str:
    """Extract ID from resource name like 'customers/123/sharedSets/456' -> '456'."""
    if not resource_name:
        return ""
    return resource_name.split("/")[-1]


def placement_criterion(url: str) -> dict:
    """Criterion body for a placement url (website or mobile app)."""
    if url.startswith(MOBILE_APP_PREFIX):
        return {"mobileApplication": {"appId": url[len(MOBILE_APP_PREFIX):]}}
    return {"placement": {"url": url}}


# =============================================================================
# GOOGLE ADS HOST
# =============================================================================


class GoogleAdsPlacementHost:
    """PlacementHost over the Google Ads REST API. Dry run skips all writes."""

    def __init__(self, ads_client: GoogleAdsClient, dry_run: bool = True):
        self.ads_client = ads_client
        self.dry_run = dry_run

    def account_time_zone(self) -> Optional[str]:
        results = self.ads_client.search("SELECT customer.time_zone FROM customer LIMIT 1")
        if not results:
            return None
        return results[0].get("customer", {}).get("timeZone")

    def iter_report(self, query: str) -> Iterator[dict]:
        return self.ads_client.iter_search(query)

    def resolve_campaign(self, campaign_id: CampaignId) -> Optional[Campaign]:
        query = f"""
            SELECT
                campaign.resource_name,
                campaign.id,
                campaign.name
            FROM campaign
            WHERE campaign.id = {gaql_id(campaign_id)}
        """
        results = self.ads_client.search(query)
        if not results:
            return None

        c = results[0].get("campaign", {})
        return Campaign(
            campaign_id=CampaignId(str(c.get("id", campaign_id))),
            name=c.get("name", ""),
            resource_name=c.get("resourceName"),
        )

    def resolve_ad_group(self, campaign_id: CampaignId, ad_group_id: AdGroupId) -> Optional[AdGroup]:
        query = f"""
            SELECT
                ad_group.resource_name,
                ad_group.id,
                ad_group.name,
                campaign.id
            FROM ad_group
            WHERE campaign.id = {gaql_id(campaign_id)}
                AND ad_group.id = {gaql_id(ad_group_id)}
        """
        results = self.ads_client.search(query)
        if not results:
            return None

        ag = results[0].get("adGroup", {})
        return AdGroup(
            ad_group_id=AdGroupId(str(ag.get("id", ad_group_id))),
            campaign_id=CampaignId(str(campaign_id)),
            name=ag.get("name", ""),
            resource_name=ag.get("resourceName"),
        )

    def find_exclusion_list(self, name: str) -> Optional[ExclusionList]:
        query = f"""
            SELECT
                shared_set.resource_name,
                shared_set.id,
                shared_set.name
            FROM shared_set
            WHERE shared_set.type = 'NEGATIVE_PLACEMENTS'
                AND shared_set.status = 'ENABLED'
                AND shared_set.name = {gaql_string(name)}
        """
        results = self.ads_client.search(query)
        if not results:
            return None

        # Duplicate names are possible; the first match wins
        s = results[0].get("sharedSet", {})
        return ExclusionList(
            list_id=str(s.get("id", "")),
            name=s.get("name", name),
            resource_name=s.get("resourceName"),
        )

    def create_exclusion_list(self, name: str) -> ExclusionList:
        if self.dry_run:
            print(f"    [DRY RUN] Would create placement exclusion list: {name}")
            return ExclusionList(list_id=DRY_RUN_LIST_ID, name=name)

        operation = {
            "create": {
                "name": name,
                "type": "NEGATIVE_PLACEMENTS",
            }
        }
        response = self.ads_client.mutate("sharedSets", [operation])
        resource_name = response["results"][0]["resourceName"]
        print(f"    Created placement exclusion list: {resource_name}")
        return ExclusionList(list_id=extract_id(resource_name), name=name, resource_name=resource_name)

    def exclude_placement(self, ad_group: AdGroup, url: str) -> None:
        ad_group_resource = ad_group.resource_name or self.ads_client.resource("adGroups", ad_group.ad_group_id)
        operation = {
            "create": {
                "adGroup": ad_group_resource,
                "negative": True,
                **placement_criterion(url),
            }
        }

        if self.dry_run:
            print(f"    [DRY RUN] Would exclude {url} on ad group {ad_group.ad_group_id}")
            return

        self.ads_client.mutate("adGroupCriteria", [operation])

    def add_to_list(self, exclusion_list: ExclusionList, url: str) -> None:
        if self.dry_run:
            print(f"    [DRY RUN] Would add {url} to list '{exclusion_list.name}'")
            return

        list_resource = exclusion_list.resource_name or self.ads_client.resource("sharedSets", exclusion_list.list_id)
        operation = {
            "create": {
                "sharedSet": list_resource,
                **placement_criterion(url),
            }
        }
        self.ads_client.mutate("sharedCriteria", [operation])
