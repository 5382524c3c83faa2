"""Deterministic account address derivation."""

from __future__ import annotations

from solders.pubkey import Pubkey

from .errors import ConfigurationError


def parse_pubkey(value: str, name: str = "program id") -> Pubkey:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ConfigurationError(f"{name} is required")
    try:
        return Pubkey.from_string(text)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {name}: {value}") from exc


def derive_address(base: Pubkey, seed: str, owner: Pubkey) -> Pubkey:
    """Return the address of the account created from ``base`` with ``seed``.

    The address has no private key and only ``owner`` may write to the
    account once created.
    """
    try:
        return Pubkey.create_with_seed(base, seed, owner)
    except ValueError as exc:
        raise ConfigurationError(f"Cannot derive address for seed '{seed}': {exc}", address=owner) from exc
