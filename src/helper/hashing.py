# src/helper/hashing.py
from __future__ import annotations

from typing import Any, List, Tuple

from hexbytes import HexBytes
from web3 import Web3

from core.enums import AssetKind
from core.models import DepositRecord, NonFungibleDeposit


# Packed encodings (Solidity abi.encodePacked) per asset kind, version 1.
# Order and types are part of the claim contract on the destination chain.
CANONICAL_TYPES = {
    AssetKind.FUNGIBLE: (
        "address",   # toToken
        "address",   # sender
        "uint256",   # value
        "bytes32",   # txId
        "uint256",   # fromChainId
        "uint256",   # toChainId
    ),
    AssetKind.NON_FUNGIBLE: (
        "address",   # toToken
        "address",   # sender
        "uint256[]", # tokenIds
        "bytes32",   # txId
        "uint256",   # fromChainId
        "uint256",   # toChainId
    ),
}


class MessageHasher:
    """
    Canonical claim digest.

        digest = keccak256(abi.encodePacked(
            toToken, sender, value | tokenIds, txId, fromChainId, toChainId))

    The destination bridge rebuilds exactly this digest from the claim
    arguments and recovers the signer from the authority signature, so the
    encoding must be reproducible byte for byte:

      * fungible deposits encode the amount as a single uint256;
      * non-fungible deposits encode the token ids as uint256[], i.e. each
        id padded to 32 bytes, in deposit order, with no length prefix.
    """

    def canonical_fields(
        self,
        record: DepositRecord,
        tx_id: str,
        from_chain_id: int,
    ) -> Tuple[Tuple[str, ...], List[Any]]:
        amount: Any
        if isinstance(record, NonFungibleDeposit):
            amount = list(record.token_ids)
        else:
            amount = record.value

        types = CANONICAL_TYPES[record.asset_kind]
        values = [
            record.to_token,
            record.sender,
            amount,
            bytes(HexBytes(tx_id)),
            int(from_chain_id),
            record.to_chain_id,
        ]
        return types, values

    def hash(self, record: DepositRecord, tx_id: str, from_chain_id: int) -> bytes:
        types, values = self.canonical_fields(record, tx_id, from_chain_id)
        return bytes(Web3.solidity_keccak(list(types), values))
