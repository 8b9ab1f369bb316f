from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from pydantic import ValidationError

from core.enums import AssetKind
from core.errors import DecodeError
from core.models import (
    DepositRecord,
    FungibleDeposit,
    NonFungibleDeposit,
    ReceiptLog,
    TransactionReceipt,
    checksum_address,
)
from verification.schemas import DepositEventSchema, get_schema

logger = logging.getLogger(__name__)


class EventDecoder:
    """
    Extracts the deposit record from a confirmed receipt.

    Matching rule: a log is the deposit iff all three hold:
      * topics[0] == expected event topic (selects the asset kind);
      * log.address == configured bridge contract of the source chain;
      * log.transaction_hash == requested tx id.

    The transaction-hash check repeats what the receipt already implies;
    it keeps a receipt served for a different hash from ever matching.

    Decoding:
      * indexed fields (token, sender) come from topics[1:];
      * value / token ids, destination chain and destination token come
        from the ABI-encoded data payload.

    Only the first matching log, in receipt order, is decoded.
    """

    def matches(
        self,
        log: ReceiptLog,
        expected_topic: str,
        expected_contract: str,
        tx_id: str,
    ) -> bool:
        if not log.topics or log.topics[0] != expected_topic.lower():
            return False
        if log.address != checksum_address(expected_contract):
            return False
        return log.transaction_hash == tx_id.lower()

    def decode(
        self,
        receipt: TransactionReceipt,
        expected_topic: str,
        expected_contract: str,
        tx_id: str,
        asset_kind: AssetKind,
    ) -> Optional[DepositRecord]:
        """
        Return the decoded deposit of the first matching log, or None if
        no log matches. A matching log that does not fit the schema raises
        DecodeError.
        """
        matching = [
            log
            for log in receipt.logs
            if self.matches(log, expected_topic, expected_contract, tx_id)
        ]
        if not matching:
            return None

        if len(matching) > 1:
            logger.debug(
                "%d matching deposit logs in %s; using log index %s",
                len(matching),
                tx_id,
                matching[0].log_index,
            )

        return self.decode_log(matching[0], get_schema(asset_kind))

    def decode_log(self, log: ReceiptLog, schema: DepositEventSchema) -> DepositRecord:
        fields: Dict[str, Any] = {}

        if len(log.topics) < 1 + len(schema.indexed):
            raise DecodeError(
                "Deposit log is missing indexed topics",
                {"topics": len(log.topics), "log_index": log.log_index},
            )

        try:
            for (name, abi_type), topic in zip(schema.indexed, log.topics[1:]):
                (fields[name],) = abi_decode([abi_type], bytes.fromhex(topic[2:]))

            values = abi_decode(list(schema.data_types), bytes.fromhex(log.data[2:]))
            for name, value in zip(schema.data_names, values):
                fields[name] = list(value) if isinstance(value, (list, tuple)) else value
        except (DecodingError, ValueError, TypeError) as exc:
            raise DecodeError(
                f"Deposit log does not match {schema.asset_kind.value} layout: {exc}",
                {"log_index": log.log_index},
            ) from exc

        return self._build_record(schema.asset_kind, fields, log)

    @staticmethod
    def _build_record(kind: AssetKind, fields: Dict[str, Any], log: ReceiptLog) -> DepositRecord:
        try:
            if kind is AssetKind.NON_FUNGIBLE:
                token_ids: List[int] = fields["token_ids"]
                return NonFungibleDeposit(
                    token=fields["token"],
                    sender=fields["sender"],
                    token_ids=token_ids,
                    to_chain_id=fields["to_chain_id"],
                    to_token=fields["to_token"],
                )
            return FungibleDeposit(
                token=fields["token"],
                sender=fields["sender"],
                value=fields["value"],
                to_chain_id=fields["to_chain_id"],
                to_token=fields["to_token"],
            )
        except ValidationError as exc:
            raise DecodeError(
                f"Decoded deposit is invalid: {exc}",
                {"log_index": log.log_index},
            ) from exc
