"""Error taxonomy for the hello world workflow."""

from __future__ import annotations

import enum
from typing import Any, Optional


class ErrorKind(enum.Enum):
    CONNECTION = "connection"
    CONFIGURATION = "configuration"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    PROGRAM_NOT_FOUND = "program_not_found"
    NOT_EXECUTABLE = "not_executable"
    PROVISION = "provision"
    SUBMISSION = "submission"
    ACCOUNT_NOT_FOUND = "account_not_found"
    DECODE = "decode"


class WorkflowError(Exception):
    """Base class for every failure surfaced by the workflow.

    ``stage`` is filled in by the orchestrator when the error escapes one of
    its stages; ``address`` names the account or program involved, if any.
    """

    kind: ErrorKind

    def __init__(self, message: str, *, address: Any = None, stage: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.address: Optional[str] = str(address) if address is not None else None
        self.stage = stage

    def __str__(self) -> str:
        return self.message


class ClusterConnectionError(WorkflowError, ConnectionError):
    """Raised when the RPC endpoint is unreachable or incompatible."""

    kind = ErrorKind.CONNECTION


class ConfigurationError(WorkflowError, ValueError):
    """Raised when an externally supplied value is malformed or missing."""

    kind = ErrorKind.CONFIGURATION


class InsufficientFundsError(WorkflowError):
    """Raised when the payer balance cannot be raised to the requirement."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class ProgramNotFoundError(WorkflowError):
    kind = ErrorKind.PROGRAM_NOT_FOUND


class NotExecutableError(WorkflowError):
    kind = ErrorKind.NOT_EXECUTABLE


class ProvisionError(WorkflowError):
    """Raised when the greeting account cannot be created."""

    kind = ErrorKind.PROVISION


class SubmissionError(WorkflowError):
    """Raised when a transaction is rejected or its confirmation times out."""

    kind = ErrorKind.SUBMISSION


class AccountNotFoundError(WorkflowError):
    kind = ErrorKind.ACCOUNT_NOT_FOUND


class DecodeError(WorkflowError, ValueError):
    """Raised when account bytes do not match the fixed greeting layout."""

    kind = ErrorKind.DECODE
