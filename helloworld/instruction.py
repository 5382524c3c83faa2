"""The greet instruction."""

from __future__ import annotations

import logging

from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from .session import NetworkSession

logger = logging.getLogger(__name__)


def build_greet_instruction(address: Pubkey, program_id: Pubkey) -> Instruction:
    # The program has a single operation and takes no instruction data.
    return Instruction(program_id, b"", [AccountMeta(address, False, True)])


def execute(session: NetworkSession, address: Pubkey, program_id: Pubkey, payer: Keypair) -> Signature:
    logger.info("Saying hello to account: %s", address)
    sig = session.submit([build_greet_instruction(address, program_id)], [payer])
    logger.info("Hello transaction confirmed with signature: %s", sig)
    return sig
