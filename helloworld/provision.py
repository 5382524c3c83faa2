"""Greeting account provisioning."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import CreateAccountWithSeedParams, create_account_with_seed

from .address import derive_address
from .codec import GREETING_SIZE
from .errors import ProvisionError, SubmissionError
from .session import NetworkSession

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    address: Pubkey
    created: bool
    signature: Optional[Signature] = None


def build_create_instruction(
    payer: Pubkey,
    address: Pubkey,
    seed: str,
    lamports: int,
    program_id: Pubkey,
) -> Instruction:
    return create_account_with_seed(
        CreateAccountWithSeedParams(
            from_pubkey=payer,
            to_pubkey=address,
            base=payer,
            seed=seed,
            lamports=lamports,
            space=GREETING_SIZE,
            owner=program_id,
        )
    )


def provision_account(session: NetworkSession, payer: Keypair, seed: str, program_id: Pubkey) -> ProvisionResult:
    address = derive_address(payer.pubkey(), seed, program_id)
    existing = session.get_account_info(address)
    if existing is not None:
        if existing.owner != program_id or len(existing.data) != GREETING_SIZE:
            logger.warning(
                "Greeting account %s is owned by %s with %d bytes of data",
                address,
                existing.owner,
                len(existing.data),
            )
        logger.info("Found existing greeting account: %s", address)
        return ProvisionResult(address=address, created=False)

    logger.info("Greeting account does not exist. Creating account: %s", address)
    lamports = session.minimum_rent_exempt_balance(GREETING_SIZE)
    ix = build_create_instruction(payer.pubkey(), address, seed, lamports, program_id)
    try:
        sig = session.submit([ix], [payer])
    except SubmissionError as exc:
        raise ProvisionError(f"Unable to create greeting account {address}: {exc}", address=address) from exc
    logger.info("Greeting account created with signature: %s", sig)
    return ProvisionResult(address=address, created=True, signature=sig)


def ensure_account(session: NetworkSession, payer: Keypair, seed: str, program_id: Pubkey) -> Pubkey:
    return provision_account(session, payer, seed, program_id).address
