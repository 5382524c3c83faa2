"""CLI entrypoint for the hello world client."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .address import parse_pubkey
from .config import load_keypair, resolve_settings, save_settings
from .constants import CLUSTER_URLS, LAMPORTS_PER_SOL, SETTINGS_FILENAME
from .errors import ConfigurationError, WorkflowError
from .workflow import WorkflowBuilder


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )


def _cmd_run(args: argparse.Namespace) -> int:
    program_id = parse_pubkey(args.program_id)
    config_path = args.config
    if args.save_config and config_path and not Path(config_path).exists():
        config_path = None
    settings = resolve_settings(
        {
            "rpc_url": args.rpc_url,
            "cluster": args.cluster,
            "payer": args.payer,
            "commitment": args.commitment,
            "confirm_timeout": args.confirm_timeout,
        },
        config_path=config_path,
    )
    if args.save_config:
        target = Path(args.config or SETTINGS_FILENAME)
        save_settings(target, settings)
        print(f"Wrote settings to {target}")
    payer = load_keypair(settings.payer)

    print("Let's say hello to a Solana account...")
    workflow = (
        WorkflowBuilder()
        .endpoint(settings.rpc_url)
        .payer(payer)
        .program_id(program_id)
        .options(
            commitment=settings.commitment,
            confirm_timeout=settings.confirm_timeout,
            fee_allowance=settings.fee_allowance,
        )
        .build()
    )
    report = workflow.run()
    print(f"  rpc_url: {settings.rpc_url}")
    print(f"  program_id: {report.program_id}")
    print(f"  payer: {report.payer} ({report.payer_balance / LAMPORTS_PER_SOL} SOL)")
    print(f"  greeting account: {report.address}{' (created)' if report.created else ''}")
    print(f"  signature: {report.signature}")
    print(f"Account {report.address} has been greeted {report.counter} time(s)")
    print("Success")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="helloworld",
        description="Say hello to an on-chain greeting account and report its counter",
    )
    parser.add_argument("program_id", help="Deployed hello world program id (base58)")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--rpc-url", help="RPC URL override")
    target.add_argument("--cluster", choices=sorted(CLUSTER_URLS), help="Named cluster")
    parser.add_argument("--payer", help="Payer keypair path")
    parser.add_argument("--commitment", choices=["processed", "confirmed", "finalized"])
    parser.add_argument("--confirm-timeout", type=float, help="Seconds to wait for each confirmation")
    parser.add_argument("--config", help=f"Settings file (default: ./{SETTINGS_FILENAME} if present)")
    parser.add_argument("--save-config", action="store_true", help="Write resolved settings to the settings file")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return _cmd_run(args)
    except FileNotFoundError as exc:
        print(f"Error: {exc}")
        return 1
    except ConfigurationError as exc:
        print(f"Error: {exc}")
        return 1
    except WorkflowError as exc:
        stage = exc.stage.value if exc.stage is not None else "setup"
        print(f"Error: {stage} failed ({exc.kind.value}): {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
