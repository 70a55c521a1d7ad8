"""
registry-audit command line.

RUN:
    python -m registry_audit validate
    python -m registry_audit verify [--json]
    python -m registry_audit verify-code-ids
    python -m registry_audit readme-testnet

Exit status 0 means a valid registry / no discrepancies; 1 means
discrepancies, a validation failure, or a fetch error.
"""

from __future__ import annotations
from dataclasses import replace
from pathlib import Path
from typing import List, Optional
import argparse
import json
import logging
import sys

from .config import AuditConfig
from .errors import RegistryAuditError
from .report import render_report
from .service import AuditService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="registry-audit",
        description="Validate a contract registry and reconcile it against chain and governance data"
    )
    parser.add_argument("--registry", help="Path to the registry JSON file")
    parser.add_argument("--api", help="Base URL of the chain REST API")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("validate", help="Check the registry file's shape")

    verify_parser = subparsers.add_parser("verify", help="Reconcile registry, chain and proposals")
    verify_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    code_ids_parser = subparsers.add_parser("verify-code-ids", help="Compare registry and chain only")
    code_ids_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    readme_parser = subparsers.add_parser("readme-testnet", help="Refresh the README testnet column")
    readme_parser.add_argument("--readme", help="Path to README.md")

    return parser


def _config_from_args(args: argparse.Namespace) -> AuditConfig:
    config = AuditConfig.from_env()
    if args.registry:
        config = replace(config, registry_path=Path(args.registry))
    if args.api:
        config = replace(config, api_base_url=args.api)
    if args.timeout:
        config = replace(config, timeout_seconds=args.timeout)
    return config


def cmd_validate(service: AuditService, config: AuditConfig, args: argparse.Namespace) -> int:
    count = service.validate()
    print(f"[PASS] {config.registry_path} is valid ({count} contracts)")
    return 0


def cmd_verify(service: AuditService, config: AuditConfig, args: argparse.Namespace) -> int:
    include_proposals = args.command == "verify"
    report = service.verify() if include_proposals else service.verify_code_ids()
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(render_report(report, include_proposals=include_proposals))
    return 0 if report.is_clean else 1


def cmd_readme(service: AuditService, config: AuditConfig, args: argparse.Namespace) -> int:
    path = Path(args.readme) if args.readme else config.readme_path
    if service.update_readme(path):
        print(f"[PASS] Updated testnet column in {path}")
    else:
        print(f"[PASS] {path} already up to date")
    return 0


COMMANDS = {
    "validate": cmd_validate,
    "verify": cmd_verify,
    "verify-code-ids": cmd_verify,
    "readme-testnet": cmd_readme,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        config = _config_from_args(args)
        service = AuditService(config)
        return handler(service, config, args)
    except RegistryAuditError as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
