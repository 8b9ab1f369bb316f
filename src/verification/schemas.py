"""
Deposit event schemas, one per asset kind.

This module maps each AssetKind to the event the bridge contract emits
when an asset is deposited:

    Deposit     (fungible):
        address indexed token, address indexed sender,
        uint256 value, uint256 toChainId, address toToken

    DepositNFT  (non-fungible):
        address indexed token, address indexed sender,
        uint256[] tokens, uint256 toChainId, address toToken

The topic hashes are fixed by the deployed contracts. The two tables are
disjoint: a log of one kind can never satisfy the schema of the other,
because topics[0] differs.
"""
from __future__ import annotations

from typing import Dict, Tuple

from pydantic import BaseModel

from core.enums import AssetKind


DEPOSIT_EVENT_TOPIC = "0xf5dd9317b9e63ac316ce44acc85f670b54b339cfa3e9076e1dd55065b922314b"
DEPOSIT_NFT_EVENT_TOPIC = "0x01a1b3d39327ab854916744d7d48fd8cdf760307cbf31e381a0bbe813efaff00"


class DepositEventSchema(BaseModel):
    """
    Layout of one deposit event.

      * topic:        topics[0] of a matching log.
      * indexed:      (name, abi type) pairs read from topics[1:], in order.
      * data_fields:  (name, abi type) pairs ABI-encoded in the data payload.
    """

    asset_kind: AssetKind
    topic: str
    indexed: Tuple[Tuple[str, str], ...]
    data_fields: Tuple[Tuple[str, str], ...]

    class Config:
        frozen = True

    @property
    def data_types(self) -> Tuple[str, ...]:
        return tuple(abi_type for _, abi_type in self.data_fields)

    @property
    def data_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.data_fields)


_INDEXED = (("token", "address"), ("sender", "address"))

DEPOSIT_EVENT_SCHEMAS: Dict[AssetKind, DepositEventSchema] = {
    AssetKind.FUNGIBLE: DepositEventSchema(
        asset_kind=AssetKind.FUNGIBLE,
        topic=DEPOSIT_EVENT_TOPIC,
        indexed=_INDEXED,
        data_fields=(
            ("value", "uint256"),
            ("to_chain_id", "uint256"),
            ("to_token", "address"),
        ),
    ),
    AssetKind.NON_FUNGIBLE: DepositEventSchema(
        asset_kind=AssetKind.NON_FUNGIBLE,
        topic=DEPOSIT_NFT_EVENT_TOPIC,
        indexed=_INDEXED,
        data_fields=(
            ("token_ids", "uint256[]"),
            ("to_chain_id", "uint256"),
            ("to_token", "address"),
        ),
    ),
}


def get_schema(kind: AssetKind) -> DepositEventSchema:
    return DEPOSIT_EVENT_SCHEMAS[kind]
