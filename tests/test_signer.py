import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from hexbytes import HexBytes
from pydantic import SecretStr
from web3 import Web3

from core.enums import ErrorKind
from core.errors import SigningError
from helper.crypto import AuthorityVerifier, KeystoreSigner

DIGEST = Web3.keccak(text="claim")


def test_signature_recovers_to_authority(signer, authority_account):
    signature = signer.sign(bytes(DIGEST))

    assert signature.startswith("0x")
    raw = HexBytes(signature)
    assert len(raw) == 65
    assert raw[64] in (27, 28)
    assert AuthorityVerifier.recover(bytes(DIGEST), signature) == authority_account.address


def test_signature_uses_eth_signed_message_prefix(signer, authority_account):
    signature = signer.sign(bytes(DIGEST))
    prefixed = Web3.keccak(b"\x19Ethereum Signed Message:\n32" + bytes(DIGEST))

    recovered = Account._recover_hash(prefixed, signature=signature)

    assert recovered == authority_account.address


def test_signing_is_deterministic(signer):
    assert signer.sign(bytes(DIGEST)) == signer.sign(bytes(DIGEST))


def test_address_known_without_unlocking(keystore, authority_account):
    signer = KeystoreSigner(keystore, None)

    assert signer.address == authority_account.address


def test_missing_password_is_signing_error(keystore):
    signer = KeystoreSigner(keystore, None)

    with pytest.raises(SigningError) as info:
        signer.sign(bytes(DIGEST))

    assert info.value.kind is ErrorKind.SIGNING_ERROR


def test_wrong_password_is_signing_error(keystore):
    signer = KeystoreSigner(keystore, SecretStr("not the password"))

    with pytest.raises(SigningError) as info:
        signer.sign(bytes(DIGEST))

    assert "not the password" not in str(info.value)


def test_corrupt_keystore_is_signing_error():
    signer = KeystoreSigner({"version": 3, "crypto": {}}, SecretStr("pw"))

    with pytest.raises(SigningError):
        signer.sign(bytes(DIGEST))


def test_digest_must_be_32_bytes(signer):
    with pytest.raises(SigningError):
        signer.sign(b"\x01" * 31)


def test_unlocked_yields_account(signer, authority_account):
    with signer.unlocked() as account:
        assert account.address == authority_account.address


def test_verifier_accepts_only_authority(signer, authority_account):
    signature = signer.sign(bytes(DIGEST))
    other = Account.create()
    forged = Web3.to_hex(
        other.sign_message(encode_defunct(primitive=bytes(DIGEST))).signature
    )

    verifier = AuthorityVerifier(authority_account.address)

    assert verifier.verify(bytes(DIGEST), signature)
    assert not verifier.verify(bytes(DIGEST), forged)
    assert not verifier.verify(bytes(Web3.keccak(text="other")), signature)
    assert not verifier.verify(bytes(DIGEST), "0x1234")
