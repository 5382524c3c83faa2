"""In-memory stand-in for NetworkSession used by the tests."""

from __future__ import annotations

from typing import Dict, List, Optional

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import ID as SYS_PROGRAM_ID
from solders.system_program import decode_create_account_with_seed

from helloworld.codec import GreetingAccount, decode, encode
from helloworld.errors import DecodeError, SubmissionError
from helloworld.session import AccountInfo

SIGNATURE_FEE = 5_000


class FakeSession:
    """Ledger with a built-in greeting program: every instruction sent to a
    deployed program increments the u32 counter of its first account."""

    def __init__(self, *, airdrop_enabled: bool = True, commitment: str = "confirmed", confirm_timeout: float = 30.0):
        self.accounts: Dict[Pubkey, AccountInfo] = {}
        self.airdrop_enabled = airdrop_enabled
        self.airdrop_lands = True
        self.reject_submissions = False
        self.truncate_state_to: Optional[int] = None
        self.commitment = commitment
        self.confirm_timeout = confirm_timeout
        self.endpoint = "memory://ledger"
        self.version = "1.18.26"
        self.airdrops: List[int] = []
        self.submitted: List[List[Instruction]] = []
        self.connects = 0

    def connect(self, endpoint: str, **kwargs) -> "FakeSession":
        self.connects += 1
        self.commitment = kwargs.get("commitment", self.commitment)
        return self

    def deploy(self, program_id: Pubkey, executable: bool = True) -> None:
        self.accounts[program_id] = AccountInfo(
            lamports=1_141_440,
            data=b"\x7fELF",
            owner=Pubkey.default(),
            executable=executable,
        )

    def fund(self, pubkey: Pubkey, lamports: int) -> None:
        info = self.accounts.get(pubkey)
        if info is None:
            self.accounts[pubkey] = AccountInfo(lamports=lamports, data=b"", owner=SYS_PROGRAM_ID, executable=False)
        else:
            info.lamports += lamports

    def get_balance(self, pubkey: Pubkey) -> int:
        info = self.accounts.get(pubkey)
        return info.lamports if info is not None else 0

    def get_account_info(self, pubkey: Pubkey) -> Optional[AccountInfo]:
        return self.accounts.get(pubkey)

    def minimum_rent_exempt_balance(self, size: int) -> int:
        return (128 + size) * 6_960

    def request_funds(self, pubkey: Pubkey, lamports: int) -> Signature:
        if not self.airdrop_enabled:
            raise SubmissionError("airdrops are disabled on this cluster", address=pubkey)
        self.airdrops.append(lamports)
        if self.airdrop_lands:
            self.fund(pubkey, lamports)
        return Signature.new_unique()

    def confirm(self, signature: Signature, timeout: Optional[float] = None) -> bool:
        return self.airdrop_lands

    def submit(self, instructions: List[Instruction], signers: List[Keypair]) -> Signature:
        if self.reject_submissions:
            raise SubmissionError("Transaction rejected: simulated failure")
        payer = signers[0].pubkey()
        if self.get_balance(payer) < SIGNATURE_FEE:
            raise SubmissionError("Transaction rejected: insufficient funds for fee")
        for ix in instructions:
            self._apply(ix)
        self.accounts[payer].lamports -= SIGNATURE_FEE
        self.submitted.append(list(instructions))
        return Signature.new_unique()

    def _apply(self, ix: Instruction) -> None:
        if ix.program_id == SYS_PROGRAM_ID:
            params = decode_create_account_with_seed(ix)
            address = params["to_pubkey"]
            if address in self.accounts:
                raise SubmissionError(f"Transaction rejected: account {address} already in use")
            self.accounts[params["from_pubkey"]].lamports -= params["lamports"]
            self.accounts[address] = AccountInfo(
                lamports=params["lamports"],
                data=bytes(params["space"]),
                owner=params["owner"],
                executable=False,
            )
            return
        program = self.accounts.get(ix.program_id)
        if program is None or not program.executable:
            raise SubmissionError(f"Transaction rejected: program {ix.program_id} not found")
        target = self.accounts.get(ix.accounts[0].pubkey)
        if target is None or target.owner != ix.program_id:
            raise SubmissionError("Transaction rejected: greeted account does not have the correct program id")
        try:
            counter = decode(target.data).counter
        except DecodeError as exc:
            raise SubmissionError(f"Transaction rejected: custom program error: {exc}") from exc
        target.data = encode(GreetingAccount(counter=counter + 1))
        if self.truncate_state_to is not None:
            target.data = target.data[: self.truncate_state_to]
