"""Payer balance top-up."""

from __future__ import annotations

import logging

from solders.keypair import Keypair

from .codec import GREETING_SIZE
from .constants import FEE_ALLOWANCE_LAMPORTS, LAMPORTS_PER_SOL
from .errors import InsufficientFundsError, SubmissionError
from .session import NetworkSession

logger = logging.getLogger(__name__)


def required_payer_balance(session: NetworkSession, fee_allowance: int = FEE_ALLOWANCE_LAMPORTS) -> int:
    """Lamports needed to fund the greeting account and pay transaction fees."""
    return session.minimum_rent_exempt_balance(GREETING_SIZE) + fee_allowance


def ensure_funded(session: NetworkSession, payer: Keypair, required: int) -> int:
    """Make sure ``payer`` holds at least ``required`` lamports.

    A single airdrop for the shortfall is requested and waited on once.
    Returns the balance observed after any top-up.
    """
    pubkey = payer.pubkey()
    lamports = session.get_balance(pubkey)
    if lamports < required:
        shortfall = required - lamports
        logger.info("Requesting airdrop for %d lamports...", shortfall)
        try:
            sig = session.request_funds(pubkey, shortfall)
            if not session.confirm(sig):
                logger.warning("Airdrop %s was not confirmed in time", sig)
        except SubmissionError as exc:
            raise InsufficientFundsError(
                f"Payer {pubkey} holds {lamports} lamports, needs {required}: {exc}",
                address=pubkey,
            ) from exc
        lamports = session.get_balance(pubkey)
        if lamports < required:
            raise InsufficientFundsError(
                f"Payer {pubkey} holds {lamports} lamports after airdrop, needs {required}",
                address=pubkey,
            )
        logger.info("Airdrop successful. New balance: %s SOL", lamports / LAMPORTS_PER_SOL)
    logger.info("Using account %s containing %s SOL to pay for fees", pubkey, lamports / LAMPORTS_PER_SOL)
    return lamports
