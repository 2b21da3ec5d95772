#!/usr/bin/env python3
"""
Placement Exclusion Run

Checks website and mobile application placements across Display and Demand
Gen campaigns, and excludes those whose urls match the configured terms.
Each excluded placement is excluded on its ad group and added to a shared
placement exclusion list (created on first use). The list still has to be
applied to campaigns by hand.

Default behavior is DRY_RUN (reads only, no mutations).

Usage:
    python -m core.exclude.run_exclusions                          # DRY_RUN, default config
    python -m core.exclude.run_exclusions --config my.json         # DRY_RUN, custom config
    python -m core.exclude.run_exclusions --execute                # LIVE WRITES
    python -m core.exclude.run_exclusions --output runs/           # also write results files

Output (with --output):
    <dir>/placement_exclusions.<timestamp>.results.json
    <dir>/placement_exclusions.<timestamp>.results.md
"""

import argparse
import json
import sys
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

import requests

from core.exclude.ads_client import GoogleAdsApiError, GoogleAdsClient, get_credentials, load_env
from core.exclude.applier import STATUS_SUCCESS, ExclusionApplier
from core.exclude.classifier import DECISION_IGNORED, classify_placement
from core.exclude.config import ConfigError, ExclusionConfig, load_config
from core.exclude.exclusion_lists import ExclusionListResolver
from core.exclude.host import GoogleAdsPlacementHost, PlacementHost
from core.exclude.report import (
    DateWindow,
    compute_date_window,
    fetch_placement_rows,
    log_empty_report,
    today_in_zone,
)

RUN_VERSION = "2.0"


@dataclass
class RunSummary:
    checked: int = 0
    excluded: int = 0
    ignored: int = 0
    failed: int = 0
    excluded_urls: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# RUN ORCHESTRATOR
# =============================================================================


class PlacementExcluder:
    """Report -> classify -> apply, one row at a time."""

    def __init__(self, host: PlacementHost, config: ExclusionConfig, today: Optional[date] = None):
        self.host = host
        self.config = config
        self.today = today
        self.window: Optional[DateWindow] = None
        self.row_results = []

    def run(self) -> RunSummary:
        summary = RunSummary()

        today = self.today or today_in_zone(self.host.account_time_zone())
        self.window = compute_date_window(self.config.days_to_check, today)
        print(f"Date range for the report: {self.window}")

        resolver = ExclusionListResolver(self.host)
        applier = ExclusionApplier(self.host, resolver, self.config)

        for row in fetch_placement_rows(self.host, self.config, self.window):
            summary.checked += 1

            decision = classify_placement(row.url, self.config)
            if decision.outcome == DECISION_IGNORED:
                summary.ignored += 1
                continue
            if not decision.exclude:
                continue

            result = applier.apply(row)
            result["matched_term"] = decision.term
            self.row_results.append(result)

            if result["status"] == STATUS_SUCCESS:
                summary.excluded += 1
                summary.excluded_urls.append(row.url)
                if self.config.log:
                    print(f"  Excluded placement: {row.url}")
            else:
                summary.failed += 1

        if summary.checked == 0:
            log_empty_report(self.config, self.window)

        print_summary(summary)
        return summary


def print_summary(summary: RunSummary):
    print()
    print("=" * 70)
    print("RUN SUMMARY")
    print("=" * 70)
    print(f"Total placements checked: {summary.checked}")
    print(f"Total placements excluded: {summary.excluded}")
    print(f"Total placements ignored: {summary.ignored}")
    print(f"Total placements failed: {summary.failed}")
    print(f"Excluded Placements: {', '.join(summary.excluded_urls)}")


# =============================================================================
# RESULTS WRITER
# =============================================================================


class ResultsWriter:
    """Writes run results to JSON and markdown files."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def write_results(self, results: dict):
        self.output_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        base_id = f"placement_exclusions.{stamp}"
        run_id = base_id
        suffix = 1
        while (self.output_dir / f"{run_id}.results.json").exists():
            run_id = f"{base_id}.{suffix}"
            suffix += 1

        json_path = self.output_dir / f"{run_id}.results.json"
        with open(json_path, "w") as f:
            json.dump(results, f, indent=2)

        md_path = self.output_dir / f"{run_id}.results.md"
        with open(md_path, "w") as f:
            f.write(self._generate_markdown(run_id, results))

        return json_path, md_path

    def _generate_markdown(self, run_id: str, results: dict) -> str:
        lines = []
        lines.append(f"# Placement Exclusion Results: {run_id}")
        lines.append("")
        lines.append(f"**Generated:** {datetime.now(timezone.utc).isoformat()}")
        lines.append("")

        lines.append("## Summary")
        lines.append("")
        lines.append("| Field | Value |")
        lines.append("|-------|-------|")
        lines.append(f"| Execution Mode | `{results.get('execution_mode')}` |")
        lines.append(f"| Date Range | `{results.get('date_range')}` |")
        lines.append(f"| Exclusion List | `{results.get('config', {}).get('EXCLUSIONS_LIST')}` |")
        summary = results.get("summary", {})
        for key in ("checked", "excluded", "ignored", "failed"):
            lines.append(f"| {key.capitalize()} | {summary.get(key, 0)} |")
        lines.append("")

        lines.append("## Placements")
        lines.append("")
        row_results = results.get("row_results", [])
        if not row_results:
            lines.append("No placements matched.")
        for r in row_results:
            line = f"- [{r.get('status')}] `{r.get('url')}` (ad group {r.get('ad_group_id')}, term `{r.get('matched_term')}`)"
            if r.get("error"):
                line += f" - {r['error']}"
            lines.append(line)
        lines.append("")

        return "\n".join(lines)


# =============================================================================
# CLI
# =============================================================================


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Exclude Display / Demand Gen placements whose urls match configured terms",
    )
    parser.add_argument("--config", type=Path, help="Path to JSON config file (defaults built in)")
    parser.add_argument("--execute", action="store_true",
                        help="Execute mutations for real (DANGEROUS). Without this flag, runs in DRY_RUN mode")
    parser.add_argument("--output", type=Path, help="Directory for results JSON/markdown files")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    dry_run = not args.execute

    print("=" * 70)
    print(f"PLACEMENT EXCLUDER v{RUN_VERSION}")
    print("=" * 70)
    print()

    if dry_run:
        print("Running in DRY_RUN mode (no actual changes)")
    else:
        print("=" * 70)
        print("WARNING: EXECUTE MODE - LIVE API WRITES ENABLED")
        print("=" * 70)
    print()

    try:
        config = load_config(args.config)
        env_path = load_env()
        if env_path:
            print(f"  [OK] Loaded environment from {env_path}")
        credentials = get_credentials()
        ads_client = GoogleAdsClient.from_credentials(credentials)
        print(f"  [OK] Google Ads client initialized for customer {ads_client.customer_id}")
        print()

        host = GoogleAdsPlacementHost(ads_client, dry_run=dry_run)
        excluder = PlacementExcluder(host, config)
        summary = excluder.run()
    except (ConfigError, GoogleAdsApiError, requests.RequestException) as e:
        print(f"\nERROR: {e}")
        sys.exit(1)

    if args.output:
        results = {
            "run_version": RUN_VERSION,
            "execution_mode": "DRY_RUN" if dry_run else "APPLY",
            "date_range": str(excluder.window),
            "config": config.to_dict(),
            "summary": summary.to_dict(),
            "row_results": excluder.row_results,
        }
        json_path, md_path = ResultsWriter(args.output).write_results(results)
        print("\nWriting results...")
        print(f"  JSON: {json_path}")
        print(f"  Markdown: {md_path}")

    print()
    print("Done.")
    sys.exit(0)


if __name__ == "__main__":
    main()
