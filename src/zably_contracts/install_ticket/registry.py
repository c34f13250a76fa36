from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from zably_contracts.install_ticket.schema import MarketplaceEntry, MarketplaceRegistry


class TrustRegistry:
    """Read-only snapshot of the marketplaces whose install tickets are accepted.

    Entries are keyed by their discovery ``issuer`` and looked up by exact
    string match: ``https://mp.example`` and ``https://mp.example/`` are
    different issuers.
    """

    def __init__(self, entries: Iterable[MarketplaceEntry]) -> None:
        by_issuer: dict[str, MarketplaceEntry] = {}
        for entry in entries:
            issuer = entry.jwks_discovery.issuer
            if issuer in by_issuer:
                raise ValueError(f"duplicate trust registry issuer: {issuer!r}")
            by_issuer[issuer] = entry
        self._entries: Mapping[str, MarketplaceEntry] = MappingProxyType(by_issuer)

    @classmethod
    def from_registry(cls, registry: MarketplaceRegistry) -> "TrustRegistry":
        return cls(registry.marketplaces)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "TrustRegistry":
        return cls.from_registry(MarketplaceRegistry.model_validate(document))

    def resolve(self, issuer: str) -> MarketplaceEntry | None:
        return self._entries.get(issuer)

    def resolve_trusted(self, issuer: str) -> MarketplaceEntry | None:
        entry = self.resolve(issuer)
        if entry is None or not entry.trusted:
            return None
        return entry

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MarketplaceEntry]:
        return iter(self._entries.values())

    def __contains__(self, issuer: object) -> bool:
        return issuer in self._entries
