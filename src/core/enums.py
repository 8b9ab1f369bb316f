# src/enums.py
from __future__ import annotations

from enum import Enum


class AssetKind(str, Enum):
    """
    Asset paths served by the bridge.

    Each kind has its own deposit event (topic + ABI layout), its own
    bridge contract per chain, and its own canonical hash encoding.
    """
    FUNGIBLE = "fungible"
    NON_FUNGIBLE = "non_fungible"

    @classmethod
    def from_flag(cls, is_nft: bool) -> "AssetKind":
        return cls.NON_FUNGIBLE if is_nft else cls.FUNGIBLE


class ErrorKind(str, Enum):
    """
    Stable failure kinds reported by the authorization service.

    Configuration:
      UnsupportedChain, MissingBridgeContract, InvalidRequest

    Chain state:
      TransactionNotFound, TransactionReverted, InsufficientConfirmations

    Event extraction:
      EventNotMatched, DecodeError

    Infrastructure:
      SigningError, NetworkError
    """

    UNSUPPORTED_CHAIN = "UnsupportedChain"
    MISSING_BRIDGE_CONTRACT = "MissingBridgeContract"
    INVALID_REQUEST = "InvalidRequest"

    TRANSACTION_NOT_FOUND = "TransactionNotFound"
    TRANSACTION_REVERTED = "TransactionReverted"
    INSUFFICIENT_CONFIRMATIONS = "InsufficientConfirmations"

    EVENT_NOT_MATCHED = "EventNotMatched"
    DECODE_ERROR = "DecodeError"

    SIGNING_ERROR = "SigningError"
    NETWORK_ERROR = "NetworkError"


class ReceiptStatus(str, Enum):
    """Outcome of checking a deposit transaction against the source chain."""
    CONFIRMED = "confirmed"
    PENDING = "pending"
    NOT_FOUND = "not_found"
    REVERTED = "reverted"


class AuthorizationStage(str, Enum):
    """
    States of a single authorize() call.

        RESOLVING_CONFIG -> VERIFYING -> MATCHING -> HASHING -> SIGNING
                                                              -> SUCCEEDED

    Any stage may move directly to FAILED; there is no way back.

    SUCCEEDED and FAILED are terminal and only appear in the DEBUG
    transition log. A failure result keeps the stage it halted in, so
    AuthorizationFailure.stage is never FAILED.
    """
    RESOLVING_CONFIG = "resolving_config"
    VERIFYING = "verifying"
    MATCHING = "matching"
    HASHING = "hashing"
    SIGNING = "signing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
