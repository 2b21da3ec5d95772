"""
Placement report requester.

Builds the group_placement_view query for the trailing date window and
streams PlacementRow records lazily from the host.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.exclude.config import ExclusionConfig
from core.exclude.host import AdGroupId, CampaignId, PlacementHost

DATE_FORMAT = "%Y%m%d"


@dataclass(frozen=True)
class DateWindow:
    start: date
    end: date

    @property
    def start_str(self) -> str:
        return self.start.strftime(DATE_FORMAT)

    @property
    def end_str(self) -> str:
        return self.end.strftime(DATE_FORMAT)

    def __str__(self):
        return f"{self.start_str} to {self.end_str}"


@dataclass(frozen=True)
class PlacementRow:
    url: str
    campaign_id: CampaignId
    ad_group_id: AdGroupId


def today_in_zone(time_zone: Optional[str] = None) -> date:
    """Today's date in the account time zone; UTC when the zone is unknown."""
    tz = timezone.utc
    if time_zone:
        try:
            tz = ZoneInfo(time_zone)
        except (ZoneInfoNotFoundError, ValueError):
            print(f"  Unknown account time zone '{time_zone}', using UTC")
    return datetime.now(tz).date()


def compute_date_window(days_to_check: int, today: date) -> DateWindow:
    """Trailing window ending today, starting days_to_check days earlier."""
    return DateWindow(start=today - timedelta(days=days_to_check), end=today)


def build_placement_query(config: ExclusionConfig, window: DateWindow) -> str:
    placement_types = "', '".join(config.placement_types)
    campaign_types = "', '".join(config.campaign_types)
    return (
        "SELECT campaign.id, ad_group.id, group_placement_view.target_url "
        "FROM group_placement_view "
        f"WHERE group_placement_view.placement_type IN ('{placement_types}') "
        f"AND metrics.impressions > {config.impression_threshold} "
        f"AND segments.date BETWEEN '{window.start.isoformat()}' AND '{window.end.isoformat()}' "
        f"AND campaign.advertising_channel_type IN ('{campaign_types}')"
    )


def parse_row(row: dict) -> PlacementRow:
    """Convert a REST result row into a PlacementRow."""
    return PlacementRow(
        url=row.get("groupPlacementView", {}).get("targetUrl", ""),
        campaign_id=CampaignId(str(row.get("campaign", {}).get("id", ""))),
        ad_group_id=AdGroupId(str(row.get("adGroup", {}).get("id", ""))),
    )


def fetch_placement_rows(host: PlacementHost, config: ExclusionConfig, window: DateWindow) -> Iterator[PlacementRow]:
    """Run the placement report. Single pass; rows are pulled as consumed."""
    query = build_placement_query(config, window)
    if config.log:
        print(f"Query: {query}")

    for row in host.iter_report(query):
        yield parse_row(row)


def log_empty_report(config: ExclusionConfig, window: DateWindow):
    print("No rows returned from the report. This could be due to:")
    print(f"1. The date range: {window}")
    print(f"2. The impression threshold: {config.impression_threshold}")
    print(f"3. The placement types: {', '.join(config.placement_types)}")
    print(f"4. The campaign types: {', '.join(config.campaign_types)}")
