from __future__ import annotations
from typing import Dict, Iterator, List

from .base import Provider
from .eastmoney import EastMoneyProvider
from .yahoo import YahooProvider


class ProviderRegistry:
    """Name -> provider mapping, filled once at startup and then frozen.

    Lookups walk providers in registration order. Re-registering a name keeps
    its original position but swaps in the new provider.
    """

    def __init__(self) -> None:
        self._providers: Dict[str, Provider] = {}
        self._frozen = False

    def register(self, name: str, provider: Provider) -> None:
        if self._frozen:
            raise RuntimeError(f"Provider registry is frozen, cannot register {name}")
        self._providers[name] = provider

    def freeze(self) -> "ProviderRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> List[str]:
        return list(self._providers)

    def get(self, name: str) -> Provider:
        if name not in self._providers:
            raise KeyError(f"Unknown provider {name}. Available: {sorted(self._providers)}")
        return self._providers[name]

    def providers_matching(self, symbol: str) -> Iterator[Provider]:
        return (p for p in self._providers.values() if p.match(symbol))

    def __len__(self) -> int:
        return len(self._providers)


def register_all_providers() -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(EastMoneyProvider.name, EastMoneyProvider())
    registry.register(YahooProvider.name, YahooProvider())
    return registry.freeze()
