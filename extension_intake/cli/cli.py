# Copyright 2026 Extension Intake Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""Command-line interface for Extension Intake."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ..core.exceptions import PolicyLoadError
from ..core.intake import ArchiveCheck, SubmissionIntake
from ..core.submission_policy import SubmissionPolicy

logger = logging.getLogger("extension_intake.cli")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _load_policy(args: argparse.Namespace) -> SubmissionPolicy | None:
    """Load the policy from ``--policy`` or return the built-in default.

    Returns None (after printing the reason) when the file cannot be used.
    """
    policy_path = getattr(args, "policy", None)
    if not policy_path:
        return SubmissionPolicy.default()
    try:
        policy = SubmissionPolicy.from_yaml(policy_path)
    except FileNotFoundError:
        print(f"Error: Policy file not found: {policy_path}", file=sys.stderr)
        return None
    except PolicyLoadError as e:
        print(f"Error loading policy file: {e}", file=sys.stderr)
        return None
    logger.info("Using submission policy: %s (%s)", policy_path, policy.policy_name)
    return policy


def _generate_summary(archive: Path, check: ArchiveCheck) -> str:
    validation = check.validation
    manifest = check.contents.manifest or {}
    lines = [
        "=" * 60,
        f"Archive: {archive}",
        "=" * 60,
        f"Status: {'[OK] VALID' if validation.valid else '[FAIL] REJECTED'}",
        f"Manifest: {check.contents.manifest_status.value}",
    ]
    if manifest:
        lines.append(f"Extension: {manifest.get('name')} v{manifest.get('version')}")
    lines.append(f"Files: {len(check.file_list)}")
    lines.append("")
    if validation.errors:
        lines.append("Errors:")
        lines.extend(f"  - {e}" for e in validation.errors)
    if validation.warnings:
        lines.append("Warnings:")
        lines.extend(f"  - {w}" for w in validation.warnings)
    return "\n".join(lines)


def _generate_json(check: ArchiveCheck) -> str:
    payload = check.validation.to_dict()
    payload.update(
        {
            "manifest_status": check.contents.manifest_status.value,
            "manifest": check.contents.manifest,
            "files": check.file_list,
            "truncated": check.contents.truncated,
        }
    )
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def check_command(args: argparse.Namespace) -> int:
    """Handle the ``check`` command for a local archive."""
    archive = Path(args.archive)
    if not archive.is_file():
        print(f"Error: File does not exist: {archive}", file=sys.stderr)
        return 1

    policy = _load_policy(args)
    if policy is None:
        return 1

    try:
        data = archive.read_bytes()
    except OSError as e:
        print(f"Error reading archive: {e}", file=sys.stderr)
        return 1

    check = SubmissionIntake(policy=policy).check_archive(data)
    output = _generate_json(check) if args.format == "json" else _generate_summary(archive, check)
    print(output)
    return 0 if check.validation.valid else 1


def generate_policy_command(args: argparse.Namespace) -> int:
    """Handle the ``generate-policy`` command."""
    output_path = Path(args.output)
    try:
        SubmissionPolicy.default().to_yaml(output_path)
    except OSError as e:
        print(f"Error generating policy: {e}", file=sys.stderr)
        return 1
    print(f"Generated submission policy: {output_path}\n")
    print("Edit the file to customise, then use:")
    print(f"  extension-intake check --policy {output_path} extension.zip")
    return 0


def serve_command(args: argparse.Namespace) -> int:
    """Handle the ``serve`` command."""
    from ..api.api_server import run_server

    run_server(host=args.host, port=args.port, reload=args.reload)
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Extension Intake - Validate browser-extension marketplace packages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  extension-intake check my-extension.zip
  extension-intake check my-extension.zip --format json
  extension-intake check my-extension.zip --policy marketplace_policy.yaml
  extension-intake generate-policy -o marketplace_policy.yaml
  extension-intake serve --port 8000
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # -- check -------------------------------------------------------------
    check_p = subparsers.add_parser("check", help="Validate a local extension archive")
    check_p.add_argument("archive", help="Path to the .zip package")
    check_p.add_argument("--format", choices=["summary", "json"], default="summary", help="Output format")
    check_p.add_argument("--policy", metavar="PATH", help="Submission policy YAML merged over the defaults")

    # -- generate-policy ---------------------------------------------------
    gp_p = subparsers.add_parser("generate-policy", help="Write the default submission policy YAML")
    gp_p.add_argument("--output", "-o", default="submission_policy.yaml", help="Output file path")

    # -- serve -------------------------------------------------------------
    serve_p = subparsers.add_parser("serve", help="Run the submission API server")
    serve_p.add_argument("--host", default="localhost", help="Host to bind to")
    serve_p.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_p.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    # -- dispatch ----------------------------------------------------------
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    dispatch = {
        "check": check_command,
        "generate-policy": generate_policy_command,
        "serve": serve_command,
    }
    handler = dispatch.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
