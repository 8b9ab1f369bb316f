"""
Shared fixtures: a small chain registry, an in-memory chain, deposit log
builders and a keystore-backed signer.
"""

from typing import Dict, List, Optional

import pytest
from eth_abi import encode as abi_encode
from eth_account import Account
from pydantic import SecretStr
from web3 import Web3

from core.errors import RpcError
from core.models import ReceiptLog, TransactionReceipt
from core.registry import StaticChainRegistry
from helper.crypto import KeystoreSigner
from rpc.base import ChainClient
from verification.schemas import DEPOSIT_EVENT_TOPIC, DEPOSIT_NFT_EVENT_TOPIC


def addr(fill: str) -> str:
    return Web3.to_checksum_address("0x" + fill * 20)


PASSWORD = "correct horse battery staple"

TX_ID = "0x" + "ab" * 32
OTHER_TX_ID = "0x" + "cd" * 32

TOKEN = addr("a1")
SENDER = addr("b2")
TO_TOKEN = addr("c3")

BRIDGE_5 = addr("d4")
NFT_BRIDGE_5 = addr("e5")
BRIDGE_56 = addr("f6")
NFT_BRIDGE_8453 = addr("17")

RPC_5 = "https://rpc.chain-5.test"
RPC_56 = "https://rpc.chain-56.test"
RPC_8453 = "https://rpc.chain-8453.test"


# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

@pytest.fixture
def registry() -> StaticChainRegistry:
    """
    5   : test network, depth 1, both bridges
    56  : depth 15, fungible bridge only
    8453: depth 1, NFT bridge only
    """
    return StaticChainRegistry.from_tables(
        providers={5: RPC_5, 56: RPC_56, 8453: RPC_8453},
        confirmations={5: 1, 56: 15, 8453: 1},
        bridges={5: BRIDGE_5, 56: BRIDGE_56},
        nft_bridges={5: NFT_BRIDGE_5, 8453: NFT_BRIDGE_8453},
    )


# ---------------------------------------------------------------------
# In-memory chain
# ---------------------------------------------------------------------

class FakeChain:
    def __init__(self, height: int = 100) -> None:
        self.height = height
        self.receipts: Dict[str, TransactionReceipt] = {}
        self.error: Optional[Exception] = None
        self.requests: List[str] = []
        self.opened = 0
        self.closed = 0

    def add_receipt(self, receipt: TransactionReceipt) -> None:
        self.receipts[receipt.transaction_hash] = receipt


class FakeChainClient(ChainClient):
    def __init__(self, endpoint: str, chain: FakeChain) -> None:
        self.endpoint = endpoint
        self._chain = chain
        chain.opened += 1

    async def get_block_number(self) -> int:
        if self._chain.error is not None:
            raise RpcError(str(self._chain.error), {"endpoint": self.endpoint})
        return self._chain.height

    async def get_transaction_receipt(self, tx_id: str) -> Optional[TransactionReceipt]:
        self._chain.requests.append(tx_id)
        if self._chain.error is not None:
            raise RpcError(str(self._chain.error), {"endpoint": self.endpoint})
        return self._chain.receipts.get(tx_id.lower())

    async def close(self) -> None:
        self._chain.closed += 1


@pytest.fixture
def chains() -> Dict[str, FakeChain]:
    return {RPC_5: FakeChain(), RPC_56: FakeChain(), RPC_8453: FakeChain()}


@pytest.fixture
def client_factory(chains):
    def factory(endpoint: str) -> FakeChainClient:
        return FakeChainClient(endpoint, chains[endpoint])
    return factory


# ---------------------------------------------------------------------
# Deposit logs
# ---------------------------------------------------------------------

def address_topic(address: str) -> str:
    return "0x" + abi_encode(["address"], [address]).hex()


def fungible_log(
    value: int = 100,
    to_chain_id: int = 56,
    to_token: str = TO_TOKEN,
    *,
    token: str = TOKEN,
    sender: str = SENDER,
    contract: str = BRIDGE_5,
    tx_id: str = TX_ID,
    topic: str = DEPOSIT_EVENT_TOPIC,
    log_index: int = 0,
) -> ReceiptLog:
    data = abi_encode(["uint256", "uint256", "address"], [value, to_chain_id, to_token])
    return ReceiptLog(
        address=contract,
        topics=[topic, address_topic(token), address_topic(sender)],
        data=data,
        transaction_hash=tx_id,
        log_index=log_index,
    )


def nft_log(
    token_ids: List[int],
    to_chain_id: int = 8453,
    to_token: str = TO_TOKEN,
    *,
    token: str = TOKEN,
    sender: str = SENDER,
    contract: str = NFT_BRIDGE_5,
    tx_id: str = TX_ID,
    topic: str = DEPOSIT_NFT_EVENT_TOPIC,
    log_index: int = 0,
) -> ReceiptLog:
    data = abi_encode(["uint256[]", "uint256", "address"], [token_ids, to_chain_id, to_token])
    return ReceiptLog(
        address=contract,
        topics=[topic, address_topic(token), address_topic(sender)],
        data=data,
        transaction_hash=tx_id,
        log_index=log_index,
    )


def make_receipt(
    logs: List[ReceiptLog],
    *,
    tx_id: str = TX_ID,
    block_number: int = 99,
    status: Optional[int] = 1,
) -> TransactionReceipt:
    return TransactionReceipt(
        transaction_hash=tx_id,
        block_number=block_number,
        status=status,
        logs=logs,
    )


# ---------------------------------------------------------------------
# Authority key
# ---------------------------------------------------------------------

@pytest.fixture(scope="session")
def authority_account():
    return Account.create()


@pytest.fixture(scope="session")
def keystore(authority_account):
    return Account.encrypt(authority_account.key, PASSWORD, kdf="pbkdf2", iterations=1024)


@pytest.fixture
def signer(keystore) -> KeystoreSigner:
    return KeystoreSigner(keystore, SecretStr(PASSWORD))
