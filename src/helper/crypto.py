# src/crypto.py
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from pydantic import SecretStr
from web3 import Web3

from core.errors import SigningError
from core.models import checksum_address


class DigestSigner(ABC):
    """
    Abstract interface for the authority signer.

    Intended semantics:

      Given the 32-byte canonical claim digest, produce a recoverable
      secp256k1 signature that the destination bridge can check against
      the known authority address.

    Implementations must not keep decrypted key material on the instance:
    the signer is shared by concurrent authorize() calls.
    """

    @property
    @abstractmethod
    def address(self) -> Optional[str]:
        """Authority address, if known without unlocking the key."""
        raise NotImplementedError

    @abstractmethod
    def sign(self, digest: bytes) -> str:
        """
        Return the 0x-prefixed 65-byte signature (r || s || v) over
        `digest`, or raise SigningError.
        """
        raise NotImplementedError


class KeystoreSigner(DigestSigner):
    """
    Signer backed by an encrypted (Web3 Secret Storage v3) keystore.

    The private key only exists inside unlocked():

        with signer.unlocked() as account:
            ...

    It is decrypted with the password on entry and the references are
    dropped on exit. Decryption is idempotent and has no side effects, so
    concurrent calls each unlock their own copy without locking.

    Signature scheme:
      * EIP-191 personal message over the raw digest bytes:
            keccak256("\\x19Ethereum Signed Message:\\n32" || digest)
      * 65 bytes r || s || v with v in {27, 28}.
    This is the format produced by web3 `accounts.sign(hash, key)` and
    expected by `ecrecover` behind `toEthSignedMessageHash` on chain.
    """

    def __init__(self, keystore: Dict[str, Any], password: Optional[SecretStr]) -> None:
        self._keystore = keystore
        self._password = password

    @property
    def address(self) -> Optional[str]:
        raw = self._keystore.get("address") if isinstance(self._keystore, dict) else None
        if not raw:
            return None
        try:
            return checksum_address(raw if raw.startswith("0x") else "0x" + raw)
        except ValueError:
            return None

    @contextmanager
    def unlocked(self) -> Iterator[LocalAccount]:
        if self._password is None:
            raise SigningError("No password set for the authority keystore")
        try:
            key = Account.decrypt(self._keystore, self._password.get_secret_value())
            account = Account.from_key(key)
        except Exception as exc:
            # The message of decrypt errors never contains the password.
            raise SigningError(f"Cannot unlock authority keystore: {exc}") from exc
        try:
            yield account
        finally:
            del account
            del key

    def sign(self, digest: bytes) -> str:
        if len(digest) != 32:
            raise SigningError("Digest must be 32 bytes", {"length": len(digest)})
        with self.unlocked() as account:
            try:
                signed = account.sign_message(encode_defunct(primitive=digest))
            except Exception as exc:
                raise SigningError(f"Signing failed: {exc}") from exc
        return Web3.to_hex(signed.signature)


class AuthorityVerifier:
    """
    Checks authority signatures the way the destination bridge does:
    recover the signer from (digest, signature) and compare it with the
    known authority address.
    """

    def __init__(self, authority_address: str) -> None:
        self.authority_address = checksum_address(authority_address)

    @staticmethod
    def recover(digest: bytes, signature: str) -> str:
        return Account.recover_message(encode_defunct(primitive=digest), signature=signature)

    def verify(self, digest: bytes, signature: str) -> bool:
        """
        Return True iff `signature` over `digest` recovers to the
        authority address. Malformed signatures are rejected, not raised.
        """
        try:
            recovered = self.recover(digest, signature)
        except Exception:
            return False
        return recovered == self.authority_address
