#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from services.crm_errors import CRMError
from services.crm_store import get_blob_store
from services.crm_workspace import CRMWorkspace
from shared.config import get_log_level, get_setting, load_settings_file

logger = logging.getLogger("crm_data")


def _login(workspace: CRMWorkspace, args: argparse.Namespace) -> None:
    email = args.email or get_setting("CRM_EMAIL")
    password = args.password or get_setting("CRM_PASSWORD")
    workspace.login(email or "", password or "")


def run(workspace: CRMWorkspace, args: argparse.Namespace) -> int:
    if args.language:
        workspace.translator.change_language(args.language)

    if args.command == "reset":
        workspace.logout()
        print("Workspace reset to the seed data set")
        return 0

    _login(workspace, args)

    if args.command == "export":
        filename, payload = workspace.export_json(args.kind)
        target = Path(args.out or filename)
        target.write_text(payload, encoding="utf-8")
        print(workspace.translator.translate(f"{args.kind}.exported_success", filename=target.stem))
    elif args.command == "import":
        count = workspace.import_json(args.kind, Path(args.file).read_bytes())
        print(workspace.translator.translate(f"{args.kind}.imported_success"))
        logger.info("Imported %d records from %s", count, args.file)
    elif args.command == "summary":
        print(workspace.summarize(args.kind, args.id))
    elif args.command == "dashboard":
        print(json.dumps({"dashboard": workspace.dashboard(), "commissions": workspace.commissions()}, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export, import and summarize CRM workspace data")
    parser.add_argument("--env-file", help="Optional .env file with CRM_* / OPENAI_* settings")
    parser.add_argument("--email", help="Login email (defaults to CRM_EMAIL)")
    parser.add_argument("--password", help="Login password (defaults to CRM_PASSWORD)")
    parser.add_argument("--language", help="Language for messages (en, pt)")
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Write the visible records of a kind to a JSON file")
    export.add_argument("kind")
    export.add_argument("--out", help="Output file (defaults to the translated section title)")

    imp = sub.add_parser("import", help="Append records from a JSON array file")
    imp.add_argument("kind")
    imp.add_argument("file")

    summary = sub.add_parser("summary", help="Generate an AI summary for a customer, deal or supplier")
    summary.add_argument("kind", choices=["customers", "deals", "suppliers"])
    summary.add_argument("id")

    sub.add_parser("dashboard", help="Print dashboard and commission figures")
    sub.add_parser("reset", help="Clear stored data and restore the seed data set")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_settings_file(args.env_file)
    logging.basicConfig(level=get_log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    store = get_blob_store(get_setting("CRM_STORE_BACKEND") or "sql")
    workspace = CRMWorkspace(store=store)
    try:
        return run(workspace, args)
    except CRMError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(exc.render(workspace.translator), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
