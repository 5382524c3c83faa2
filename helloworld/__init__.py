"""Client for the on-chain hello world greeting program."""

from .address import derive_address, parse_pubkey
from .codec import GREETING_SIZE, GreetingAccount, decode, encode
from .errors import ErrorKind, WorkflowError
from .workflow import Stage, Workflow, WorkflowBuilder, WorkflowContext, WorkflowReport

__all__ = [
    "derive_address",
    "parse_pubkey",
    "GREETING_SIZE",
    "GreetingAccount",
    "decode",
    "encode",
    "ErrorKind",
    "WorkflowError",
    "Stage",
    "Workflow",
    "WorkflowBuilder",
    "WorkflowContext",
    "WorkflowReport",
]

__version__ = "0.1.0"
