"""RPC session wrapping the solana-py client."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solders.errors import SerdeJSONError
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction
from solders.transaction_status import TransactionConfirmationStatus

from .constants import ALLOWED_COMMITMENT, CONFIRM_POLL_INTERVAL, DEFAULT_COMMITMENT, DEFAULT_CONFIRM_TIMEOUT
from .errors import ClusterConnectionError, ConfigurationError, SubmissionError

logger = logging.getLogger(__name__)

# Non-JSON-RPC responses surface as SerdeJSONError from the response parser.
_RPC_ERRORS = (SolanaRpcException, RPCException, SerdeJSONError)

_COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


@dataclass
class AccountInfo:
    lamports: int
    data: bytes
    owner: Pubkey
    executable: bool


def _status_rank(status) -> int:
    level = status.confirmation_status
    if level is None:
        # Nodes that omit confirmation_status report rooted slots as confirmations=None.
        return 2 if status.confirmations is None else 1
    if level == TransactionConfirmationStatus.Finalized:
        return 2
    if level == TransactionConfirmationStatus.Confirmed:
        return 1
    return 0


class NetworkSession:
    """Connection to a ledger RPC endpoint at a fixed commitment level."""

    def __init__(
        self,
        client: Client,
        endpoint: str,
        commitment: str = DEFAULT_COMMITMENT,
        confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT,
    ) -> None:
        if commitment not in ALLOWED_COMMITMENT:
            raise ConfigurationError(f"commitment must be one of {sorted(ALLOWED_COMMITMENT)}")
        self.client = client
        self.endpoint = endpoint
        self.commitment = commitment
        self.confirm_timeout = confirm_timeout
        self.version: Optional[str] = None

    @classmethod
    def connect(
        cls,
        endpoint: str,
        commitment: str = DEFAULT_COMMITMENT,
        confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT,
        client_factory: Callable[..., Client] = Client,
    ) -> "NetworkSession":
        client = client_factory(endpoint, commitment=Commitment(commitment))
        session = cls(client, endpoint, commitment=commitment, confirm_timeout=confirm_timeout)
        try:
            resp = client.get_version()
        except _RPC_ERRORS as exc:
            raise ClusterConnectionError(f"Unable to reach RPC endpoint {endpoint}: {exc}") from exc
        version = getattr(resp, "value", None)
        core = getattr(version, "solana_core", None)
        if not core:
            raise ClusterConnectionError(f"RPC endpoint {endpoint} did not report a ledger version")
        session.version = str(core)
        logger.info("Connection to cluster established: %s (version %s)", endpoint, session.version)
        return session

    def _call(self, what: str, fn: Callable, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except _RPC_ERRORS as exc:
            raise ClusterConnectionError(f"{what} failed against {self.endpoint}: {exc}") from exc

    def get_balance(self, pubkey: Pubkey) -> int:
        return int(self._call("getBalance", self.client.get_balance, pubkey).value)

    def get_account_info(self, pubkey: Pubkey) -> Optional[AccountInfo]:
        resp = self._call("getAccountInfo", self.client.get_account_info, pubkey, encoding="base64")
        info = resp.value
        if info is None:
            return None
        return AccountInfo(
            lamports=int(info.lamports),
            data=bytes(info.data),
            owner=info.owner,
            executable=bool(info.executable),
        )

    def minimum_rent_exempt_balance(self, size: int) -> int:
        resp = self._call(
            "getMinimumBalanceForRentExemption",
            self.client.get_minimum_balance_for_rent_exemption,
            size,
        )
        return int(resp.value)

    def request_funds(self, pubkey: Pubkey, lamports: int) -> Signature:
        """Request an airdrop; most clusters other than localnet/devnet/testnet refuse."""
        try:
            return self.client.request_airdrop(pubkey, lamports).value
        except _RPC_ERRORS as exc:
            raise SubmissionError(f"Airdrop of {lamports} lamports was refused: {exc}", address=pubkey) from exc

    def confirm(self, signature: Signature, timeout: Optional[float] = None) -> bool:
        """Wait for ``signature`` to reach the session commitment.

        Returns False when ``timeout`` expires first and raises SubmissionError
        if the transaction landed with an error.
        """
        limit = self.confirm_timeout if timeout is None else timeout
        wanted = _COMMITMENT_RANK[self.commitment]
        deadline = time.monotonic() + limit
        while True:
            resp = self._call("getSignatureStatuses", self.client.get_signature_statuses, [signature])
            status = resp.value[0] if resp.value else None
            if status is not None:
                if status.err is not None:
                    raise SubmissionError(f"Transaction {signature} failed: {status.err}")
                if _status_rank(status) >= wanted:
                    return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(CONFIRM_POLL_INTERVAL)

    def submit(self, instructions: Sequence[Instruction], signers: List[Keypair]) -> Signature:
        """Sign, send and confirm a transaction paid for by ``signers[0]``."""
        if not signers:
            raise SubmissionError("a transaction needs at least one signer")
        tx = Transaction.new_with_payer(list(instructions), signers[0].pubkey())
        blockhash = self._call("getLatestBlockhash", self.client.get_latest_blockhash).value.blockhash
        tx.sign(signers, blockhash)
        try:
            sig = self.client.send_raw_transaction(
                bytes(tx),
                opts=TxOpts(skip_preflight=False, preflight_commitment=Commitment(self.commitment)),
            ).value
        except _RPC_ERRORS as exc:
            raise SubmissionError(f"Transaction rejected: {exc}") from exc
        logger.debug("Sent transaction %s", sig)
        if not self.confirm(sig):
            raise SubmissionError(
                f"Transaction {sig} not {self.commitment} within {self.confirm_timeout:g}s"
            )
        return sig
