import asyncio
import logging
import re
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel
from core.enums import AssetKind, AuthorizationStage, ErrorKind, ReceiptStatus
from core.errors import (
    AuthorityError,
    EventNotMatchedError,
    InsufficientConfirmationsError,
    InvalidRequestError,
    MissingBridgeContractError,
    TransactionNotFoundError,
    TransactionRevertedError,
)
from core.models import NonFungibleDeposit
from core.registry import ChainRegistry
from helper.crypto import DigestSigner
from helper.hashing import MessageHasher
from rpc.base import ChainClientFactory
from rpc.web3_client import Web3ChainClient
from verification.events import EventDecoder
from verification.receipt import ReceiptVerifier
from verification.schemas import get_schema

logger = logging.getLogger(__name__)

TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


class AuthorizationSuccess(BaseModel):
    """
    Signed claim authorization.

    Fields
    ------
    signature : str
        Authority signature over the canonical claim digest.
    token : str
        Token to receive on the destination chain (the deposit's toToken).
    value : int | List[int]
        Amount for fungible deposits, ordered token ids for non-fungible.
    to : str
        Receiver on the destination chain (the depositor).
    chain_id : int
        Destination chain where the claim is made.
    bridge : str
        Bridge contract on the destination chain for this asset kind.
    """
    is_success: Literal[True] = True
    signature: str
    token: str
    value: Union[int, List[int]]
    to: str
    chain_id: int
    bridge: str

    class Config:
        frozen = True

    def to_response(self) -> Dict[str, Any]:
        """JSON shape served to callers; uint256 values as decimal strings."""
        if isinstance(self.value, list):
            value: Any = [str(v) for v in self.value]
        else:
            value = str(self.value)
        return {
            "isSuccess": True,
            "signature": self.signature,
            "token": self.token,
            "value": value,
            "to": self.to,
            "chainId": self.chain_id,
            "bridge": self.bridge,
        }


class AuthorizationFailure(BaseModel):
    """
    Typed failure of one authorize() call.

    `stage` is the state the call was in when it halted; `remaining` is
    set only for InsufficientConfirmations.
    """
    is_success: Literal[False] = False
    kind: ErrorKind
    message: str
    stage: AuthorizationStage = AuthorizationStage.RESOLVING_CONFIG
    remaining: Optional[int] = None

    class Config:
        frozen = True

    def to_response(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "isSuccess": False,
            "message": self.message,
            "kind": self.kind.value,
        }
        if self.remaining is not None:
            response["remaining"] = self.remaining
        return response


AuthorizationResult = Union[AuthorizationSuccess, AuthorizationFailure]


class AuthorizationService:
    """
    Verifies a deposit on its source chain and signs the matching claim.

    -------------------------------------------------------------------------
    1. Flow
    -------------------------------------------------------------------------

        RESOLVING_CONFIG  ChainRegistry.lookup(from_chain_id, kind)
        VERIFYING         ReceiptVerifier.verify(...)   → must be CONFIRMED
        MATCHING          EventDecoder.decode(...)      → DepositRecord
        HASHING           MessageHasher.hash(...)       → digest
        SIGNING           DigestSigner.sign(digest)     → signature
        SUCCEEDED         AuthorizationSuccess

    Any error moves the call straight to FAILED. Nothing is retried: a
    pending deposit, for instance, is reported with the number of blocks
    still missing and the caller asks again later.

    -------------------------------------------------------------------------
    2. Error handling
    -------------------------------------------------------------------------

    Every collaborator raises an AuthorityError subclass (third-party
    exceptions are wrapped where they occur). authorize() converts them to
    AuthorizationFailure with the error's kind, so callers always get a
    result object and never a transport exception.

    -------------------------------------------------------------------------
    3. Concurrency
    -------------------------------------------------------------------------

    The service holds only read-only collaborators (registry, signer
    configuration, stateless decoder/hasher). Each call builds its own
    chain client and closes it after the reads, so concurrent calls do not
    interfere. Signing decrypts the keystore, which is CPU bound, and runs
    in a worker thread so other calls keep making progress meanwhile.
    """

    def __init__(
        self,
        registry: ChainRegistry,
        signer: DigestSigner,
        *,
        client_factory: ChainClientFactory = Web3ChainClient,
        decoder: Optional[EventDecoder] = None,
        hasher: Optional[MessageHasher] = None,
    ) -> None:
        self.registry = registry
        self.signer = signer
        self.verifier = ReceiptVerifier(client_factory)
        self.decoder = decoder or EventDecoder()
        self.hasher = hasher or MessageHasher()

    async def authorize(
        self,
        tx_id: str,
        from_chain_id: int,
        is_nft: bool = False,
    ) -> AuthorizationResult:
        """
        Authorize the claim for deposit `tx_id` made on `from_chain_id`.

        Parameters
        ----------
        tx_id : str
            Deposit transaction hash (0x + 64 hex digits).
        from_chain_id : int
            Chain where the deposit transaction was sent.
        is_nft : bool
            True for the non-fungible bridge, False for the token bridge.

        Returns
        -------
        AuthorizationResult
            AuthorizationSuccess, or AuthorizationFailure with a stable kind.
        """
        stage = AuthorizationStage.RESOLVING_CONFIG
        kind = AssetKind.from_flag(is_nft)
        try:
            tx_id = self._validate_tx_id(tx_id)
            from_chain_id = self._validate_chain_id(from_chain_id)
            config = self.registry.lookup(from_chain_id, kind)
            schema = get_schema(kind)

            stage = AuthorizationStage.VERIFYING
            logger.debug("%s: %s", tx_id, stage.value)
            check = await self.verifier.verify(
                config.rpc_endpoint, tx_id, config.confirmation_depth
            )
            self._require_confirmed(check, tx_id)

            stage = AuthorizationStage.MATCHING
            logger.debug("%s: %s", tx_id, stage.value)
            record = self.decoder.decode(
                check.receipt, schema.topic, config.bridge_for(kind), tx_id, kind
            )
            if record is None:
                raise EventNotMatchedError(
                    f"Wrong transaction hash: {tx_id}",
                    {"chain_id": from_chain_id, "asset_kind": kind.value},
                )
            bridge = self.registry.bridge_for(record.to_chain_id, kind)
            if bridge is None:
                raise MissingBridgeContractError(
                    f"No bridgeContract for chain ID: {record.to_chain_id}",
                    {"chain_id": record.to_chain_id, "asset_kind": kind.value},
                )

            stage = AuthorizationStage.HASHING
            logger.debug("%s: %s", tx_id, stage.value)
            digest = self.hasher.hash(record, tx_id, from_chain_id)

            stage = AuthorizationStage.SIGNING
            logger.debug("%s: %s", tx_id, stage.value)
            # keystore decryption is CPU bound; keep the event loop free
            signature = await asyncio.to_thread(self.signer.sign, digest)
        except AuthorityError as exc:
            return self._fail(exc, stage, tx_id, from_chain_id)

        stage = AuthorizationStage.SUCCEEDED
        logger.debug("%s: %s", tx_id, stage.value)
        logger.info(
            "Authorized %s deposit %s from chain %s to chain %s",
            kind.value,
            tx_id,
            from_chain_id,
            record.to_chain_id,
        )
        value: Union[int, List[int]]
        if isinstance(record, NonFungibleDeposit):
            value = list(record.token_ids)
        else:
            value = record.value
        return AuthorizationSuccess(
            signature=signature,
            token=record.to_token,
            value=value,
            to=record.sender,
            chain_id=record.to_chain_id,
            bridge=bridge,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_tx_id(tx_id: Any) -> str:
        if not isinstance(tx_id, str) or not TX_HASH_PATTERN.match(tx_id):
            raise InvalidRequestError(f"Wrong transaction hash: {tx_id}")
        return tx_id.lower()

    @staticmethod
    def _validate_chain_id(chain_id: Any) -> int:
        if isinstance(chain_id, bool):
            raise InvalidRequestError(f"Wrong chain ID: {chain_id}")
        try:
            value = int(chain_id)
        except (TypeError, ValueError):
            raise InvalidRequestError(f"Wrong chain ID: {chain_id}") from None
        # int() truncates 5.9 to 5
        if value < 0 or (not isinstance(chain_id, str) and value != chain_id):
            raise InvalidRequestError(f"Wrong chain ID: {chain_id}")
        return value

    @staticmethod
    def _require_confirmed(check, tx_id: str) -> None:
        if check.status is ReceiptStatus.NOT_FOUND:
            raise TransactionNotFoundError(f"Wrong transaction hash: {tx_id}")
        if check.status is ReceiptStatus.REVERTED:
            raise TransactionRevertedError(f"Transaction reverted: {tx_id}")
        if check.status is ReceiptStatus.PENDING:
            logger.info("Deposit %s pending: %s", tx_id, check.describe())
            raise InsufficientConfirmationsError(check.describe(), remaining=check.remaining)

    @staticmethod
    def _fail(
        exc: AuthorityError,
        stage: AuthorizationStage,
        tx_id: Any,
        from_chain_id: Any,
    ) -> AuthorizationFailure:
        remaining = getattr(exc, "remaining", None)
        logger.debug("%s: %s -> %s", tx_id, stage.value, AuthorizationStage.FAILED.value)
        if remaining is None:
            logger.error(
                "Authorization failed at %s for %s on chain %s: [%s] %s",
                stage.value,
                tx_id,
                from_chain_id,
                exc.kind.value,
                exc,
            )
        return AuthorizationFailure(
            kind=exc.kind,
            message=exc.message,
            stage=stage,
            remaining=remaining,
        )
