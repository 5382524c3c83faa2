"""Greeting account state reads."""

from __future__ import annotations

from solders.pubkey import Pubkey

from .codec import decode
from .errors import AccountNotFoundError
from .session import NetworkSession


def read_counter(session: NetworkSession, address: Pubkey) -> int:
    info = session.get_account_info(address)
    if info is None:
        raise AccountNotFoundError(f"Cannot find the greeted account {address}", address=address)
    return decode(info.data, address=address).counter
