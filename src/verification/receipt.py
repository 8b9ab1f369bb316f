# src/verification/receipt.py
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from core.enums import ReceiptStatus
from core.evidence import ReceiptCheck
from core.models import TransactionReceipt
from rpc.base import ChainClientFactory

logger = logging.getLogger(__name__)


def evaluate_finality(
    receipt: Optional[TransactionReceipt],
    current_height: int,
    confirmation_depth: int,
) -> ReceiptCheck:
    """
    Depth-based finality rule for a fetched receipt.

    Semantics:

      - No receipt                       → NOT_FOUND
      - Receipt with failed execution    → REVERTED
      - Otherwise, with
            confirmations = current_height - receipt.block_number
            remaining     = confirmation_depth - confirmations
        remaining > 0                    → PENDING(remaining)
        remaining <= 0                   → CONFIRMED

    This is a k-confirmations rule: a deposit is only trusted once
    `confirmation_depth` blocks sit on top of its block, which bounds the
    reorg risk per chain. The rule is evaluated against live height on
    every call; nothing is remembered between calls.
    """
    if receipt is None:
        return ReceiptCheck(
            status=ReceiptStatus.NOT_FOUND,
            current_height=current_height,
            confirmation_depth=confirmation_depth,
        )

    if not receipt.succeeded:
        return ReceiptCheck(
            status=ReceiptStatus.REVERTED,
            receipt=receipt,
            current_height=current_height,
            confirmation_depth=confirmation_depth,
        )

    confirmations = current_height - receipt.block_number
    remaining = confirmation_depth - confirmations
    if remaining > 0:
        return ReceiptCheck(
            status=ReceiptStatus.PENDING,
            receipt=receipt,
            current_height=current_height,
            confirmation_depth=confirmation_depth,
            confirmations=confirmations,
            remaining=remaining,
        )

    return ReceiptCheck(
        status=ReceiptStatus.CONFIRMED,
        receipt=receipt,
        current_height=current_height,
        confirmation_depth=confirmation_depth,
        confirmations=confirmations,
    )


class ReceiptVerifier:
    """
    Fetches a deposit receipt and the chain height from the source chain
    and judges finality with evaluate_finality().

    The two reads have no ordering dependency and are awaited together.
    The client is closed once the reads are done, whether they succeeded
    or not. Any RpcError raised by the client propagates unchanged; there is no
    retry here.
    """

    def __init__(self, client_factory: ChainClientFactory) -> None:
        self._client_factory = client_factory

    async def verify(
        self,
        rpc_endpoint: str,
        tx_id: str,
        confirmation_depth: int,
    ) -> ReceiptCheck:
        client = self._client_factory(rpc_endpoint)
        try:
            current_height, receipt = await asyncio.gather(
                client.get_block_number(),
                client.get_transaction_receipt(tx_id),
            )
        finally:
            await client.close()
        check = evaluate_finality(receipt, current_height, confirmation_depth)
        logger.debug(
            "Receipt check for %s at height %s: %s",
            tx_id,
            current_height,
            check.status.value,
        )
        return check
