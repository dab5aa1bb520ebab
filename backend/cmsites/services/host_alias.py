"""
Hostname alias resolution.
"""
from typing import Iterable, Mapping


class HostAliasResolver:
    """Maps an alias hostname onto its canonical hostname."""

    def __init__(self, aliases: Mapping[str, Iterable[str]] | None = None):
        self.aliases = aliases or {}

    def resolve(self, host: str) -> str:
        """Return the canonical host listing ``host`` as an alias, else ``host``."""
        for canonical, alias_hosts in self.aliases.items():
            if host in alias_hosts:
                return canonical
        return host
