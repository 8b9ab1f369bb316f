from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.enums import AssetKind
from core.errors import MissingBridgeContractError, UnsupportedChainError
from core.models import ChainConfig


# ======================================================================
# 1. Abstract Interface: ChainRegistry
# ======================================================================

class ChainRegistry(ABC):
    """
    Read-only view of the per-chain configuration.

    The registry is loaded once at process start and never mutated
    afterwards, so concurrent authorize() calls can share one instance
    without locking.

    It answers two questions:

        (1) For a *source* chain: where do I read receipts, how deep must
            a deposit be, and which contract must have emitted it?
                → lookup(chain_id, kind)

        (2) For a *destination* chain: which bridge contract will honor
            the claim?
                → bridge_for(chain_id, kind)
    """

    @abstractmethod
    def get(self, chain_id: int) -> Optional[ChainConfig]:
        """Return the configuration of a chain, or None if unknown."""
        raise NotImplementedError

    @abstractmethod
    def chain_ids(self) -> List[int]:
        raise NotImplementedError

    def lookup(self, chain_id: int, kind: AssetKind) -> ChainConfig:
        """
        Resolve a source chain for the given asset kind.

        Raises:
            UnsupportedChainError:      no RPC endpoint configured.
            MissingBridgeContractError: no bridge contract for `kind`.
        """
        config = self.get(chain_id)
        if config is None:
            raise UnsupportedChainError(
                f"No provider for chain ID: {chain_id}",
                {"chain_id": chain_id},
            )
        if config.bridge_for(kind) is None:
            raise MissingBridgeContractError(
                f"No bridgeContract for chain ID: {chain_id}",
                {"chain_id": chain_id, "asset_kind": kind.value},
            )
        return config

    def bridge_for(self, chain_id: int, kind: AssetKind) -> Optional[str]:
        config = self.get(chain_id)
        if config is None:
            return None
        return config.bridge_for(kind)


# ======================================================================
# 2. Concrete immutable implementation
# ======================================================================

class StaticChainRegistry(ChainRegistry):
    """
    Registry backed by a frozen chain_id → ChainConfig mapping.

    Construction helpers:
        from_tables(...) : the four flat tables the deployment is
                            described with (providers, depths, bridges,
                            NFT bridges).
        from_mapping(...): nested JSON-style mapping, one entry per chain.
    """

    def __init__(self, configs: Iterable[ChainConfig]) -> None:
        table: Dict[int, ChainConfig] = {}
        for config in configs:
            if config.chain_id in table:
                raise ValueError(f"Duplicate chain ID: {config.chain_id}")
            table[config.chain_id] = config
        self._configs: Mapping[int, ChainConfig] = MappingProxyType(table)

    def get(self, chain_id: int) -> Optional[ChainConfig]:
        return self._configs.get(chain_id)

    def chain_ids(self) -> List[int]:
        return sorted(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._configs

    @classmethod
    def from_tables(
        cls,
        providers: Mapping[int, str],
        confirmations: Mapping[int, int],
        bridges: Mapping[int, str],
        nft_bridges: Optional[Mapping[int, str]] = None,
    ) -> "StaticChainRegistry":
        """
        Build a registry from flat per-chain tables.

        Only chains with a provider become entries. A provider without a
        confirmation depth is a configuration mistake and is rejected.
        """
        nft_bridges = nft_bridges or {}
        configs = []
        for chain_id, endpoint in providers.items():
            if chain_id not in confirmations:
                raise ValueError(f"No confirmation depth for chain ID: {chain_id}")
            configs.append(
                ChainConfig(
                    chain_id=chain_id,
                    rpc_endpoint=endpoint,
                    confirmation_depth=confirmations[chain_id],
                    bridge_contract=bridges.get(chain_id),
                    nft_bridge_contract=nft_bridges.get(chain_id),
                )
            )
        return cls(configs)

    @classmethod
    def from_mapping(cls, data: Mapping[Any, Mapping[str, Any]]) -> "StaticChainRegistry":
        """
        Build a registry from {chain_id: {rpc_endpoint, confirmation_depth,
        bridge_contract?, nft_bridge_contract?}}. Keys may be strings, as
        they are when the mapping comes from JSON.
        """
        configs = []
        for key, entry in data.items():
            configs.append(ChainConfig(**dict(entry, chain_id=int(key))))
        return cls(configs)
