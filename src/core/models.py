from __future__ import annotations
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator
from web3 import Web3

from core.enums import AssetKind


def checksum_address(value: str) -> str:
    """Normalize an address to EIP-55 form; raises ValueError if malformed."""
    if not isinstance(value, str) or not Web3.is_address(value.lower()):
        raise ValueError(f"Invalid address: {value!r}")
    return Web3.to_checksum_address(value.lower())


def normalize_hex(value: Union[str, bytes]) -> str:
    """Lower-case, 0x-prefixed hex string for bytes or hex input."""
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value)
    if not isinstance(value, str):
        raise ValueError(f"Expected hex string, got {type(value).__name__}")
    text = value.lower()
    if not text.startswith("0x"):
        text = "0x" + text
    int(text[2:] or "0", 16)
    return text


# ======================================================================
# 1. ChainConfig: static per-chain configuration
# ======================================================================

class ChainConfig(BaseModel):
    """
    Static configuration of one chain the authority understands.

    A chain is known to the registry only if it has an RPC endpoint. The
    bridge contracts are optional: a chain without a contract for an
    asset kind can neither be a source nor a destination for that kind.
    """

    chain_id: int = Field(..., description="EVM chain identifier.")

    rpc_endpoint: str = Field(
        ...,
        description="JSON-RPC endpoint used to read receipts and block height.",
    )

    confirmation_depth: int = Field(
        ...,
        ge=0,
        description="Blocks required on top of the deposit block before it is final.",
    )

    bridge_contract: Optional[str] = Field(
        default=None,
        description="Bridge contract emitting fungible deposit events.",
    )

    nft_bridge_contract: Optional[str] = Field(
        default=None,
        description="Bridge contract emitting non-fungible deposit events.",
    )

    class Config:
        frozen = True

    @field_validator("bridge_contract", "nft_bridge_contract")
    @classmethod
    def _checksum(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return checksum_address(value)

    def bridge_for(self, kind: AssetKind) -> Optional[str]:
        if kind is AssetKind.NON_FUNGIBLE:
            return self.nft_bridge_contract
        return self.bridge_contract


# ======================================================================
# 2. Receipt view: the subset of an EVM receipt the authority reads
# ======================================================================

class ReceiptLog(BaseModel):
    """
    One log entry of a transaction receipt.

    topics[0] is the event signature hash; for deposit events topics[1]
    and topics[2] hold the indexed token and sender addresses.
    """

    address: str
    topics: List[str] = Field(default_factory=list)
    data: str = "0x"
    transaction_hash: str
    log_index: Optional[int] = None

    class Config:
        frozen = True

    @field_validator("address")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return checksum_address(value)

    @field_validator("topics", mode="before")
    @classmethod
    def _topics(cls, value):
        return [normalize_hex(t) for t in value]

    @field_validator("data", "transaction_hash", mode="before")
    @classmethod
    def _hex(cls, value):
        return normalize_hex(value)


class TransactionReceipt(BaseModel):
    transaction_hash: str
    block_number: int
    status: Optional[int] = None
    logs: List[ReceiptLog] = Field(default_factory=list)

    class Config:
        frozen = True

    @field_validator("transaction_hash", mode="before")
    @classmethod
    def _hex(cls, value):
        return normalize_hex(value)

    @property
    def succeeded(self) -> bool:
        # Receipts without a status field are treated as failed.
        return self.status == 1


# ======================================================================
# 3. DepositRecord: decoded deposit event, tagged by asset kind
# ======================================================================

class FungibleDeposit(BaseModel):
    """Deposit of `value` units of `token`, claimable as `to_token` on `to_chain_id`."""

    asset_kind: Literal[AssetKind.FUNGIBLE] = AssetKind.FUNGIBLE
    token: str
    sender: str
    value: int = Field(..., ge=0)
    to_chain_id: int = Field(..., ge=0)
    to_token: str

    class Config:
        frozen = True

    @field_validator("token", "sender", "to_token")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return checksum_address(value)


class NonFungibleDeposit(BaseModel):
    """Deposit of the ordered `token_ids` of collection `token`."""

    asset_kind: Literal[AssetKind.NON_FUNGIBLE] = AssetKind.NON_FUNGIBLE
    token: str
    sender: str
    token_ids: List[int] = Field(default_factory=list)
    to_chain_id: int = Field(..., ge=0)
    to_token: str

    class Config:
        frozen = True

    @field_validator("token", "sender", "to_token")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return checksum_address(value)

    @field_validator("token_ids")
    @classmethod
    def _unsigned(cls, value: List[int]) -> List[int]:
        if any(v < 0 for v in value):
            raise ValueError("token ids must be unsigned")
        return value


DepositRecord = Union[FungibleDeposit, NonFungibleDeposit]
