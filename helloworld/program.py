"""Deployed program checks."""

from __future__ import annotations

import logging

from solders.pubkey import Pubkey

from .errors import NotExecutableError, ProgramNotFoundError
from .session import NetworkSession

logger = logging.getLogger(__name__)


def verify_program(session: NetworkSession, program_id: Pubkey) -> None:
    logger.info("Checking deployment of program %s...", program_id)
    info = session.get_account_info(program_id)
    if info is None:
        raise ProgramNotFoundError(
            f"Program with ID {program_id} has not been deployed or the ID is incorrect",
            address=program_id,
        )
    if not info.executable:
        raise NotExecutableError(f"Program with ID {program_id} is not executable", address=program_id)
    logger.info("Successfully found executable program %s", program_id)
