"""
Placement exclusion configuration.

One immutable record, built once at startup and passed to every component.
Option names match the job's JSON config file (LOG, EXCLUSIONS_LIST, ...).
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# =============================================================================
# CONSTANTS
# =============================================================================

MATCH_ENDS_WITH = "ENDS_WITH"
MATCH_CONTAINS = "CONTAINS"
MATCH_MODES = {MATCH_ENDS_WITH, MATCH_CONTAINS}

PLACEMENT_TYPES = {"WEBSITE", "MOBILE_APPLICATION"}
CAMPAIGN_TYPES = {"DISPLAY", "DEMAND_GEN"}

DEFAULT_EXCLUSIONS_LIST = "Auto Excluded Placements"
DEFAULT_EXCLUDE_TERMS = ("game", ".game", ".games", "games")
DEFAULT_IGNORE_TERMS = ("edu", "gov")

# Config file key -> dataclass field
OPTION_FIELDS = {
    "LOG": "log",
    "EXCLUSIONS_LIST": "exclusions_list",
    "IMPRESSION_THRESHOLD": "impression_threshold",
    "DAYS_TO_CHECK": "days_to_check",
    "EXCLUDE_TERMS": "exclude_terms",
    "IGNORE_TERMS": "ignore_terms",
    "MATCH_MODE": "match_mode",
    "PLACEMENT_TYPES": "placement_types",
    "CAMPAIGN_TYPES": "campaign_types",
}


class ConfigError(Exception):
    """Raised when configuration or credentials are invalid."""
    pass


# =============================================================================
# CONFIG RECORD
# =============================================================================


@dataclass(frozen=True)
class ExclusionConfig:
    log: bool = True
    exclusions_list: str = DEFAULT_EXCLUSIONS_LIST
    impression_threshold: int = 0
    days_to_check: int = 60
    exclude_terms: tuple = DEFAULT_EXCLUDE_TERMS
    ignore_terms: tuple = DEFAULT_IGNORE_TERMS
    match_mode: str = MATCH_ENDS_WITH
    placement_types: tuple = ("WEBSITE", "MOBILE_APPLICATION")
    campaign_types: tuple = ("DISPLAY", "DEMAND_GEN")

    def __post_init__(self):
        # Lists from JSON arrive as lists; keep the record hashable and read-only
        for name in ("exclude_terms", "ignore_terms", "placement_types", "campaign_types"):
            value = getattr(self, name)
            if isinstance(value, (list, set, frozenset)):
                object.__setattr__(self, name, tuple(value))
        if isinstance(self.match_mode, str):
            object.__setattr__(self, "match_mode", self.match_mode.upper())
        self.validate()

    def validate(self):
        """Validate all fields. Raises ConfigError listing every problem."""
        errors = []

        if not isinstance(self.log, bool):
            errors.append(f"LOG must be true or false, got {self.log!r}")

        if not isinstance(self.exclusions_list, str) or not self.exclusions_list.strip():
            errors.append("EXCLUSIONS_LIST must be a non-empty string")

        if not _is_int(self.impression_threshold) or self.impression_threshold < 0:
            errors.append(f"IMPRESSION_THRESHOLD must be an integer >= 0, got {self.impression_threshold!r}")

        if not _is_int(self.days_to_check) or self.days_to_check <= 0:
            errors.append(f"DAYS_TO_CHECK must be an integer > 0, got {self.days_to_check!r}")

        for option, terms in (("EXCLUDE_TERMS", self.exclude_terms), ("IGNORE_TERMS", self.ignore_terms)):
            if not isinstance(terms, tuple) or not all(isinstance(t, str) and t for t in terms):
                errors.append(f"{option} must be a list of non-empty strings")

        if not isinstance(self.match_mode, str) or self.match_mode not in MATCH_MODES:
            errors.append(
                f"MATCH_MODE must be one of {', '.join(sorted(MATCH_MODES))}, got {self.match_mode!r}"
            )

        for option, values, allowed in (
            ("PLACEMENT_TYPES", self.placement_types, PLACEMENT_TYPES),
            ("CAMPAIGN_TYPES", self.campaign_types, CAMPAIGN_TYPES),
        ):
            if not isinstance(values, tuple) or not values:
                errors.append(f"{option} must be a non-empty list")
                continue
            unknown = [v for v in values if not isinstance(v, str) or v not in allowed]
            if unknown:
                errors.append(
                    f"{option} has unknown values {unknown}; allowed: {', '.join(sorted(allowed))}"
                )

        if errors:
            raise ConfigError("Invalid configuration:\n  " + "\n  ".join(errors))

    @classmethod
    def from_dict(cls, data: dict) -> "ExclusionConfig":
        """Build from a dict keyed by option name (LOG, EXCLUSIONS_LIST, ...)."""
        unknown = [key for key in data if key not in OPTION_FIELDS]
        if unknown:
            raise ConfigError(
                f"Unknown config options: {', '.join(sorted(unknown))}. "
                f"Supported: {', '.join(OPTION_FIELDS)}"
            )
        kwargs = {OPTION_FIELDS[key]: value for key, value in data.items()}
        return cls(**kwargs)

    def to_dict(self) -> dict:
        """Inverse of from_dict, with lists instead of tuples."""
        result = {}
        for option, attr in OPTION_FIELDS.items():
            value = getattr(self, attr)
            result[option] = list(value) if isinstance(value, tuple) else value
        return result


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def load_config(path: Optional[Path] = None) -> ExclusionConfig:
    """Load config from a JSON file, or return defaults when no path is given."""
    if path is None:
        return ExclusionConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file is not valid JSON: {path} ({e})")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {path}")

    return ExclusionConfig.from_dict(data)
