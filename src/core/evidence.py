from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field
from core.enums import ReceiptStatus
from core.models import TransactionReceipt


class ReceiptCheck(BaseModel):
    """
    What the source chain says about a deposit transaction.

    This is the only chain-level evidence the authority relies on: the
    receipt as served by the configured RPC node, judged against the
    current chain height and the chain's confirmation depth.

      * CONFIRMED  → receipt is set and the block is at least
                     `confirmation_depth` blocks deep.
      * PENDING    → receipt is set, `remaining` more blocks are needed.
      * NOT_FOUND  → the node has no receipt for this hash.
      * REVERTED   → the receipt reports a failed execution.

    Only a CONFIRMED check may be used to authorize a claim.
    """

    status: ReceiptStatus

    receipt: Optional[TransactionReceipt] = Field(
        default=None,
        description="Receipt as fetched; None when the transaction is unknown.",
    )

    current_height: Optional[int] = Field(
        default=None,
        description="Chain height observed together with the receipt.",
    )

    confirmation_depth: int = Field(default=0, ge=0)

    confirmations: Optional[int] = Field(
        default=None,
        description="current_height - receipt.block_number.",
    )

    remaining: int = Field(
        default=0,
        description="confirmation_depth - confirmations while PENDING, else 0.",
    )

    class Config:
        frozen = True

    @property
    def is_confirmed(self) -> bool:
        return self.status is ReceiptStatus.CONFIRMED

    def describe(self) -> str:
        if self.status is ReceiptStatus.PENDING:
            return f"Confirming: {self.confirmations} of {self.confirmation_depth}"
        if self.status is ReceiptStatus.REVERTED:
            return "Transaction reverted"
        if self.status is ReceiptStatus.NOT_FOUND:
            return "Transaction not found"
        return f"Confirmed: {self.confirmations} of {self.confirmation_depth}"
