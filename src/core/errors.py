"""
Exception hierarchy for the bridge authority.

Every exception maps to exactly one ErrorKind. The AuthorizationService
catches AuthorityError at its boundary and turns it into a failure result,
so none of these reach the caller of authorize().
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from core.enums import ErrorKind


class AuthorityError(Exception):
    """Base exception for all bridge authority errors"""

    kind: ErrorKind = ErrorKind.NETWORK_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class UnsupportedChainError(AuthorityError):
    """Raised when no RPC endpoint is configured for a chain"""
    kind = ErrorKind.UNSUPPORTED_CHAIN


class MissingBridgeContractError(AuthorityError):
    """Raised when a chain has no bridge contract for the asset kind"""
    kind = ErrorKind.MISSING_BRIDGE_CONTRACT


class InvalidRequestError(AuthorityError):
    """Raised when the request itself is malformed"""
    kind = ErrorKind.INVALID_REQUEST


class TransactionNotFoundError(AuthorityError):
    """Raised when the source chain has no receipt for the transaction"""
    kind = ErrorKind.TRANSACTION_NOT_FOUND


class TransactionRevertedError(AuthorityError):
    """Raised when the deposit transaction failed on chain"""
    kind = ErrorKind.TRANSACTION_REVERTED


class InsufficientConfirmationsError(AuthorityError):
    """Raised when the deposit block is not deep enough yet"""
    kind = ErrorKind.INSUFFICIENT_CONFIRMATIONS

    def __init__(self, message: str, remaining: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.remaining = remaining


class EventNotMatchedError(AuthorityError):
    """Raised when no receipt log matches topic, contract and tx hash"""
    kind = ErrorKind.EVENT_NOT_MATCHED


class DecodeError(AuthorityError):
    """Raised when a matching log does not decode against its ABI layout"""
    kind = ErrorKind.DECODE_ERROR


class SigningError(AuthorityError):
    """Raised when the key is unavailable or signing fails"""
    kind = ErrorKind.SIGNING_ERROR


class RpcError(AuthorityError):
    """Raised when a call to the chain node fails"""
    kind = ErrorKind.NETWORK_ERROR
