from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import os
import sys
from typing import Sequence

from dal_client.config import ClientSettings, ConfigurationError
from dal_client.logging_utils import configure_logging
from dal_client.responses import DalResponse
from dal_client.services import DalClient


def build_client(args: argparse.Namespace) -> DalClient:
    client = DalClient(ClientSettings.from_env())
    if args.base_url:
        client.set_base_url(args.base_url)
    if args.xml:
        client.set_response_type("XML")
    return client


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dal-client",
        description="Log in to a DAL server, run one query and print the rows.",
    )
    parser.add_argument("command", help="DAL query command, e.g. list/genus/_nperpage/page/_num")
    parser.add_argument("--base-url", help="overrides DAL_BASE_URL")
    parser.add_argument("--username", default=os.getenv("DAL_USERNAME"))
    parser.add_argument("--group", type=int, help="group id to switch to after login")
    parser.add_argument("--tag", action="append", dest="tags", help="only print rows for this tag")
    parser.add_argument("--xml", action="store_true", help="request XML instead of JSON")
    return parser


def _print_rows(response: DalResponse, tags: Sequence[str] | None) -> bool:
    def visitor(tag_name, rowdata):
        label = tag_name if tag_name is not None else "ERROR"
        print(f"{label}: {json.dumps(rowdata)}")
        return True

    return response.visit_results(visitor, list(tags) if tags else None)


async def run(args: argparse.Namespace) -> int:
    client = build_client(args)

    if args.username:
        password = os.getenv("DAL_PASSWORD") or getpass.getpass(f"Password for {args.username}: ")
        response = await client.login(args.username, password)
        if response.get_response_error_message() is not None and not client.is_logged_in():
            print(f"Login failed: {response.get_response_error_message()}", file=sys.stderr)
            return 1

    try:
        if args.group is not None:
            response = await client.switch_group(args.group)
            if response.get_response_error_message() is not None:
                print(f"Switch group failed: {response.get_response_error_message()}", file=sys.stderr)
                return 1

        response = await client.perform_query(args.command)
        return 0 if _print_rows(response, args.tags) else 1
    finally:
        if client.is_logged_in():
            client.logout()


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
