from abc import abstractmethod, ABC
from typing import Callable, Optional

from core.models import TransactionReceipt


class ChainClient(ABC):
    """
    Abstract read-only access to one chain node.

    The authority needs exactly two reads per call: the current block
    height and the receipt of the deposit transaction. Both are
    independent and may be awaited concurrently.

    Implementations must:
      - return None from get_transaction_receipt() when the node does not
        know the transaction (this is not an error);
      - raise core.errors.RpcError for every transport or node failure,
        so that callers only ever see the authority's own exceptions;
      - release sockets in close(); the owner of a client calls it once
        the reads are done.
    """

    endpoint: str

    @abstractmethod
    async def get_block_number(self) -> int:
        """Return the height of the latest block known to the node."""
        raise NotImplementedError

    @abstractmethod
    async def get_transaction_receipt(self, tx_id: str) -> Optional[TransactionReceipt]:
        """
        Return the receipt of `tx_id`, or None if the transaction is
        unknown or not yet mined.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections held by the client. Safe to call twice."""
        return None


ChainClientFactory = Callable[[str], ChainClient]
