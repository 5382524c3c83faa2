"""Fixed-layout encoding of greeting account state."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .constants import COUNTER_FORMAT, COUNTER_MAX
from .errors import DecodeError

GREETING_SIZE = struct.calcsize(COUNTER_FORMAT)


@dataclass(frozen=True)
class GreetingAccount:
    counter: int = 0


def encode(account: GreetingAccount) -> bytes:
    if account.counter < 0 or account.counter > COUNTER_MAX:
        raise ValueError("counter must be within u32 range")
    return struct.pack(COUNTER_FORMAT, account.counter)


def decode(data: bytes, address: object = None) -> GreetingAccount:
    if len(data) != GREETING_SIZE:
        raise DecodeError(
            f"greeting account data must be exactly {GREETING_SIZE} bytes, got {len(data)}",
            address=address,
        )
    (counter,) = struct.unpack(COUNTER_FORMAT, data)
    return GreetingAccount(counter=counter)
