from core.exclude.classifier import (
    DECISION_EXCLUDED,
    DECISION_IGNORED,
    DECISION_NO_MATCH,
    classify_placement,
    should_exclude,
)
from core.exclude.config import ExclusionConfig


def make_config(**kwargs):
    defaults = {"exclude_terms": ("games",), "ignore_terms": (), "match_mode": "ENDS_WITH"}
    defaults.update(kwargs)
    return ExclusionConfig(**defaults)


def test_ends_with_matches_suffix():
    """URL ending in the exclude term is excluded in ENDS_WITH mode."""
    assert should_exclude("https://foo.bar.games", make_config()) is True


def test_ends_with_requires_full_suffix():
    """'game' is not a suffix of '...games'."""
    config = make_config(exclude_terms=("game",))

    assert should_exclude("https://foo.bar.games", config) is False


def test_contains_matches_anywhere():
    config = make_config(match_mode="CONTAINS")

    assert should_exclude("https://games.example.com/page", config) is True


def test_ends_with_does_not_match_middle():
    assert should_exclude("https://games.example.com/page", make_config()) is False


def test_ignore_term_takes_precedence():
    """A URL matching an ignore term is never excluded."""
    config = make_config(ignore_terms=("edu",), match_mode="CONTAINS")

    assert should_exclude("https://school.edu/games", config) is False
    assert classify_placement("https://school.edu/games", config) == (DECISION_IGNORED, "edu")


def test_ignore_term_wins_in_ends_with_mode():
    config = make_config(ignore_terms=("gov",))

    assert should_exclude("https://city.gov.games", config) is False


def test_case_insensitive_url():
    assert should_exclude("HTTPS://SITE.GAMES", make_config()) is True


def test_case_insensitive_terms():
    config = make_config(exclude_terms=("GAMES",), ignore_terms=("EDU",), match_mode="CONTAINS")

    assert should_exclude("https://play.games.com", config) is True
    assert should_exclude("https://play.games.edu", config) is False


def test_no_match_in_either_list():
    config = make_config(ignore_terms=("edu",))

    decision = classify_placement("https://news.example.com", config)

    assert decision.outcome == DECISION_NO_MATCH
    assert decision.term is None
    assert decision.exclude is False


def test_first_matching_exclude_term_is_reported():
    config = make_config(exclude_terms=("game", ".games", "games"))

    decision = classify_placement("https://fun.games", config)

    assert decision.outcome == DECISION_EXCLUDED
    assert decision.term == ".games"


def test_first_matching_ignore_term_is_reported():
    config = make_config(ignore_terms=("gov", "edu"), match_mode="CONTAINS")

    assert classify_placement("https://edu.gov/games", config).term == "gov"


def test_empty_term_lists_never_exclude():
    config = make_config(exclude_terms=(), ignore_terms=())

    assert should_exclude("https://fun.games", config) is False


def test_diagnostic_log_names_term(capsys):
    should_exclude("https://Fun.Games", make_config())

    out = capsys.readouterr().out
    assert "Matched exclude term: games for URL: https://fun.games" in out


def test_ignore_log_names_term(capsys):
    config = make_config(ignore_terms=("edu",))
    should_exclude("https://school.edu", config)

    out = capsys.readouterr().out
    assert "Ignored placement due to match with ignore term: edu" in out


def test_no_diagnostics_when_logging_disabled(capsys):
    config = make_config(log=False, ignore_terms=("edu",))

    should_exclude("https://fun.games", config)
    should_exclude("https://school.edu", config)

    assert capsys.readouterr().out == ""
