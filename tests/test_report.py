from datetime import date

from core.exclude.config import ExclusionConfig
from core.exclude.report import (
    DateWindow,
    PlacementRow,
    build_placement_query,
    compute_date_window,
    fetch_placement_rows,
    log_empty_report,
    parse_row,
    today_in_zone,
)
from tests.fakes import FakePlacementHost, make_row


def test_date_window_trails_today():
    window = compute_date_window(30, date(2024, 3, 15))

    assert window.start == date(2024, 2, 14)
    assert window.end == date(2024, 3, 15)
    assert window.start_str == "20240214"
    assert window.end_str == "20240315"
    assert str(window) == "20240214 to 20240315"


def test_today_in_zone_falls_back_to_utc(capsys):
    assert isinstance(today_in_zone("Not/AZone"), date)
    assert "using UTC" in capsys.readouterr().out


def test_today_in_zone_accepts_known_zone():
    assert isinstance(today_in_zone("Europe/Amsterdam"), date)
    assert isinstance(today_in_zone(None), date)


def test_query_contains_all_filters():
    config = ExclusionConfig(impression_threshold=10, campaign_types=("DISPLAY",))
    window = DateWindow(start=date(2024, 1, 1), end=date(2024, 1, 31))

    query = build_placement_query(config, window)

    assert "FROM group_placement_view" in query
    assert "SELECT campaign.id, ad_group.id, group_placement_view.target_url" in query
    assert "group_placement_view.placement_type IN ('WEBSITE', 'MOBILE_APPLICATION')" in query
    assert "metrics.impressions > 10" in query
    assert "segments.date BETWEEN '2024-01-01' AND '2024-01-31'" in query
    assert "campaign.advertising_channel_type IN ('DISPLAY')" in query


def test_parse_row():
    row = parse_row(make_row("https://fun.games", campaign_id=5, ad_group_id=6))

    assert row == PlacementRow(url="https://fun.games", campaign_id="5", ad_group_id="6")


def test_parse_row_without_url():
    assert parse_row({"campaign": {"id": "1"}, "adGroup": {"id": "2"}}).url == ""


def test_rows_are_fetched_lazily():
    host = FakePlacementHost(rows=[make_row("a.games"), make_row("b.games"), make_row("c.games")])
    window = compute_date_window(7, date(2024, 1, 8))

    rows = fetch_placement_rows(host, ExclusionConfig(log=False), window)
    assert host.queries == []

    first = next(rows)
    assert first.url == "a.games"
    assert host.rows_yielded == 1

    assert [r.url for r in rows] == ["b.games", "c.games"]
    assert len(host.queries) == 1


def test_query_logged_when_enabled(capsys):
    host = FakePlacementHost()
    window = compute_date_window(7, date(2024, 1, 8))

    list(fetch_placement_rows(host, ExclusionConfig(), window))

    assert "Query: SELECT campaign.id" in capsys.readouterr().out


def test_empty_report_diagnostics(capsys):
    config = ExclusionConfig(impression_threshold=3)
    log_empty_report(config, DateWindow(start=date(2024, 1, 1), end=date(2024, 1, 31)))

    out = capsys.readouterr().out
    assert "No rows returned from the report" in out
    assert "20240101 to 20240131" in out
    assert "The impression threshold: 3" in out
    assert "WEBSITE, MOBILE_APPLICATION" in out
    assert "DISPLAY, DEMAND_GEN" in out
