"""Sequencing of the hello world client workflow."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from .constants import DEFAULT_COMMITMENT, DEFAULT_CONFIRM_TIMEOUT, FEE_ALLOWANCE_LAMPORTS, GREETING_SEED
from .errors import ConfigurationError, WorkflowError
from .funding import ensure_funded, required_payer_balance
from .instruction import execute
from .program import verify_program
from .provision import provision_account
from .session import NetworkSession
from .state import read_counter

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., NetworkSession]


class Stage(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    PAYER_FUNDED = "payer_funded"
    PROGRAM_VERIFIED = "program_verified"
    ACCOUNT_PROVISIONED = "account_provisioned"
    INSTRUCTION_EXECUTED = "instruction_executed"
    STATE_REPORTED = "state_reported"


@dataclass
class WorkflowContext:
    session: NetworkSession
    payer: Keypair
    program_id: Pubkey
    seed: str = GREETING_SEED
    derived_address: Optional[Pubkey] = None


@dataclass
class WorkflowReport:
    program_id: Pubkey
    payer: Pubkey
    address: Pubkey
    counter: int
    created: bool
    signature: Signature
    payer_balance: int


class Workflow:
    """One run of connect, fund, verify, provision, execute and read.

    Each call to ``run`` starts from ``Stage.DISCONNECTED``. A failing stage
    aborts the run; the error is re-raised with ``stage`` set to the state the
    workflow was trying to reach.
    """

    def __init__(
        self,
        endpoint: str,
        payer: Keypair,
        program_id: Pubkey,
        *,
        seed: str = GREETING_SEED,
        commitment: str = DEFAULT_COMMITMENT,
        confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT,
        fee_allowance: int = FEE_ALLOWANCE_LAMPORTS,
        connect: Optional[SessionFactory] = None,
    ) -> None:
        self.endpoint = endpoint
        self.payer = payer
        self.program_id = program_id
        self.seed = seed
        self.commitment = commitment
        self.confirm_timeout = confirm_timeout
        self.fee_allowance = fee_allowance
        self._connect = connect or NetworkSession.connect
        self.stage = Stage.DISCONNECTED

    def _advance(self, target: Stage, step: Callable[[], object]):
        try:
            result = step()
        except WorkflowError as exc:
            if exc.stage is None:
                exc.stage = target
            raise
        self.stage = target
        return result

    def run(self) -> WorkflowReport:
        self.stage = Stage.DISCONNECTED
        session = self._advance(
            Stage.CONNECTED,
            lambda: self._connect(
                self.endpoint,
                commitment=self.commitment,
                confirm_timeout=self.confirm_timeout,
            ),
        )
        ctx = WorkflowContext(session=session, payer=self.payer, program_id=self.program_id, seed=self.seed)

        balance = self._advance(Stage.PAYER_FUNDED, lambda: self._fund(ctx))
        self._advance(Stage.PROGRAM_VERIFIED, lambda: verify_program(ctx.session, ctx.program_id))
        provisioned = self._advance(
            Stage.ACCOUNT_PROVISIONED,
            lambda: provision_account(ctx.session, ctx.payer, ctx.seed, ctx.program_id),
        )
        ctx.derived_address = provisioned.address
        signature = self._advance(
            Stage.INSTRUCTION_EXECUTED,
            lambda: execute(ctx.session, provisioned.address, ctx.program_id, ctx.payer),
        )
        counter = self._advance(Stage.STATE_REPORTED, lambda: read_counter(ctx.session, provisioned.address))
        logger.info("Account %s has been greeted %d time(s)", provisioned.address, counter)
        return WorkflowReport(
            program_id=ctx.program_id,
            payer=ctx.payer.pubkey(),
            address=provisioned.address,
            counter=counter,
            created=provisioned.created,
            signature=signature,
            payer_balance=balance,
        )

    def _fund(self, ctx: WorkflowContext) -> int:
        required = required_payer_balance(ctx.session, self.fee_allowance)
        return ensure_funded(ctx.session, ctx.payer, required)


class WorkflowBuilder:
    """Collects workflow inputs; ``build`` fails until all required ones are set."""

    def __init__(self) -> None:
        self._endpoint: Optional[str] = None
        self._payer: Optional[Keypair] = None
        self._program_id: Optional[Pubkey] = None
        self._options: dict = {}

    def endpoint(self, url: str) -> "WorkflowBuilder":
        self._endpoint = url
        return self

    def payer(self, keypair: Keypair) -> "WorkflowBuilder":
        self._payer = keypair
        return self

    def program_id(self, program_id: Pubkey) -> "WorkflowBuilder":
        self._program_id = program_id
        return self

    def options(self, **kwargs) -> "WorkflowBuilder":
        self._options.update(kwargs)
        return self

    def build(self) -> Workflow:
        missing: List[str] = []
        if not self._endpoint:
            missing.append("endpoint")
        if self._payer is None:
            missing.append("payer")
        if self._program_id is None:
            missing.append("program_id")
        if missing:
            raise ConfigurationError(f"Workflow is missing required inputs: {', '.join(missing)}")
        return Workflow(self._endpoint, self._payer, self._program_id, **self._options)
