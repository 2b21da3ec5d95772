"""
Exclusion list resolver.

get_or_create(name): exact-name lookup on the host, create when missing.
Handles are cached per resolver so one run touches the host at most once
per list name.
"""

from core.exclude.host import ExclusionList, PlacementHost


class ExclusionListResolver:
    def __init__(self, host: PlacementHost):
        self.host = host
        self.cache = {}

    def get_or_create(self, name: str) -> ExclusionList:
        if name in self.cache:
            return self.cache[name]

        exclusion_list = self.host.find_exclusion_list(name)
        if exclusion_list is None:
            print(f"  Exclusion list '{name}' not found, creating it")
            exclusion_list = self.host.create_exclusion_list(name)

        self.cache[name] = exclusion_list
        return exclusion_list
