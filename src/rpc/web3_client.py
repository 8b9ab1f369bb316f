from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import TransactionNotFound

from core.errors import RpcError
from core.models import ReceiptLog, TransactionReceipt
from rpc.base import ChainClient

logger = logging.getLogger(__name__)


def receipt_from_web3(raw: Mapping[str, Any]) -> TransactionReceipt:
    """
    Convert a web3 receipt (AttributeDict with HexBytes values) into the
    authority's TransactionReceipt view.
    """
    logs = [
        ReceiptLog(
            address=entry["address"],
            topics=list(entry.get("topics", [])),
            data=entry.get("data", b""),
            transaction_hash=entry["transactionHash"],
            log_index=entry.get("logIndex"),
        )
        for entry in raw.get("logs", [])
    ]
    return TransactionReceipt(
        transaction_hash=raw["transactionHash"],
        block_number=int(raw["blockNumber"]),
        status=raw.get("status"),
        logs=logs,
    )


class Web3ChainClient(ChainClient):
    """
    ChainClient over JSON-RPC using web3's AsyncWeb3.

    A new client is created per authorize() call, so no connection state
    is shared between concurrent calls. The provider's HTTP session is
    closed in close(). There is no retry and no timeout beyond the HTTP
    session defaults; callers own both policies.
    """

    def __init__(self, endpoint: str, w3: Optional[AsyncWeb3] = None) -> None:
        self.endpoint = endpoint
        self._w3 = w3 or AsyncWeb3(AsyncHTTPProvider(endpoint))

    async def get_block_number(self) -> int:
        try:
            return int(await self._w3.eth.block_number)
        except Exception as exc:
            raise RpcError(
                f"Failed to read block number: {exc}",
                {"endpoint": self.endpoint},
            ) from exc

    async def get_transaction_receipt(self, tx_id: str) -> Optional[TransactionReceipt]:
        try:
            raw = await self._w3.eth.get_transaction_receipt(tx_id)
        except TransactionNotFound:
            logger.debug("No receipt for %s on %s", tx_id, self.endpoint)
            return None
        except Exception as exc:
            raise RpcError(
                f"Failed to read receipt: {exc}",
                {"endpoint": self.endpoint, "tx_id": tx_id},
            ) from exc

        if raw is None:
            return None

        try:
            return receipt_from_web3(raw)
        except (KeyError, TypeError, ValueError) as exc:
            raise RpcError(
                f"Malformed receipt from node: {exc}",
                {"endpoint": self.endpoint, "tx_id": tx_id},
            ) from exc

    async def close(self) -> None:
        try:
            await self._w3.provider.disconnect()
        except Exception as exc:
            # the reads already completed; a failed close only loses sockets
            logger.warning("Failed to close provider for %s: %s", self.endpoint, exc)
