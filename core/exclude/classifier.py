"""
Placement classifier.

Pure decision over (url, config):
    1. Ignore terms (substring, case-insensitive). First hit -> keep placement.
    2. Exclude terms, in list order, per MATCH_MODE. First hit -> exclude.
    3. Nothing matched -> keep placement.
"""

from typing import NamedTuple, Optional

from core.exclude.config import MATCH_ENDS_WITH, ExclusionConfig

DECISION_IGNORED = "IGNORED"
DECISION_EXCLUDED = "EXCLUDED"
DECISION_NO_MATCH = "NO_MATCH"


class PlacementDecision(NamedTuple):
    outcome: str
    term: Optional[str] = None

    @property
    def exclude(self) -> bool:
        return self.outcome == DECISION_EXCLUDED


def classify_placement(url: str, config: ExclusionConfig) -> PlacementDecision:
    """Classify a placement url and report which term decided it."""
    lower_url = url.lower()

    for term in config.ignore_terms:
        if term.lower() in lower_url:
            if config.log:
                print(f"  Ignored placement due to match with ignore term: {term} for URL: {lower_url}")
            return PlacementDecision(DECISION_IGNORED, term)

    for term in config.exclude_terms:
        exclude_term = term.lower()
        if config.match_mode == MATCH_ENDS_WITH:
            match = lower_url.endswith(exclude_term)
        else:
            match = exclude_term in lower_url

        if match:
            if config.log:
                print(f"  Matched exclude term: {exclude_term} for URL: {lower_url}")
            return PlacementDecision(DECISION_EXCLUDED, term)

    return PlacementDecision(DECISION_NO_MATCH)


def should_exclude(url: str, config: ExclusionConfig) -> bool:
    return classify_placement(url, config).exclude
