from core.exclude.exclusion_lists import ExclusionListResolver
from core.exclude.host import ExclusionList
from tests.fakes import FakePlacementHost


def test_existing_list_is_returned():
    existing = ExclusionList(list_id="42", name="Auto Excluded Placements")
    host = FakePlacementHost(lists={"Auto Excluded Placements": existing})

    result = ExclusionListResolver(host).get_or_create("Auto Excluded Placements")

    assert result == existing
    assert host.create_calls == 0


def test_missing_list_is_created():
    host = FakePlacementHost()

    result = ExclusionListResolver(host).get_or_create("New List")

    assert result.name == "New List"
    assert host.create_calls == 1


def test_repeated_calls_return_same_list_and_create_once():
    host = FakePlacementHost()
    resolver = ExclusionListResolver(host)

    first = resolver.get_or_create("New List")
    second = resolver.get_or_create("New List")

    assert first == second
    assert host.create_calls == 1
    assert host.find_calls == 1


def test_separate_runs_converge_on_same_list():
    """A second run finds the list created by the first."""
    host = FakePlacementHost()

    first = ExclusionListResolver(host).get_or_create("New List")
    second = ExclusionListResolver(host).get_or_create("New List")

    assert first == second
    assert host.create_calls == 1
    assert host.find_calls == 2


def test_lookup_is_exact_name():
    host = FakePlacementHost(lists={"Auto Excluded": ExclusionList(list_id="1", name="Auto Excluded")})

    result = ExclusionListResolver(host).get_or_create("Auto Excluded Placements")

    assert result.list_id != "1"
    assert host.create_calls == 1
