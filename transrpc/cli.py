"""
Command-line interface for the Transmission RPC client.

Connection settings default to the TURL, TUSER and TPWD environment variables
(a .env file is read as well).

Usage:
    transrpc session-get
    transrpc torrent-get --fields id name status
    transrpc torrent-action start 1 2 3
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

import httpx

from .auth import BasicAuth
from .client import TransClient
from .config import Config
from .errors import TransmissionError
from .types import RpcResponse, TorrentAction, TorrentGetField


ACTIONS = {action.value[len("torrent-"):]: action for action in TorrentAction}
DEFAULT_FIELDS = [TorrentGetField.ID.value, TorrentGetField.NAME.value, TorrentGetField.STATUS.value]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Transmission RPC client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s session-get
  %(prog)s torrent-get --fields id name percentDone
  %(prog)s torrent-action stop 4 5
"""
    )
    parser.add_argument("--url", default=Config.TRANSMISSION_URL, help="RPC endpoint URL")
    parser.add_argument("--user", default=Config.TRANSMISSION_USERNAME, help="Basic auth user")
    parser.add_argument("--password", default=Config.TRANSMISSION_PASSWORD, help="Basic auth password")
    parser.add_argument("--timeout", type=float, default=Config.TRANSMISSION_TIMEOUT, help="Request timeout in seconds")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("session-get", help="Show daemon session settings")

    get_parser = subparsers.add_parser("torrent-get", help="List torrents")
    get_parser.add_argument(
        "--fields",
        nargs="+",
        default=DEFAULT_FIELDS,
        choices=[field.value for field in TorrentGetField],
        help="Torrent fields to request",
    )

    action_parser = subparsers.add_parser("torrent-action", help="Start, stop or verify torrents")
    action_parser.add_argument("action", choices=list(ACTIONS), help="Action to perform")
    action_parser.add_argument("ids", nargs="+", type=int, help="Torrent ids")

    return parser


async def run_command(client: TransClient, args: argparse.Namespace) -> RpcResponse:
    if args.command == "session-get":
        return await client.session_get()
    if args.command == "torrent-get":
        return await client.torrent_get([TorrentGetField(field) for field in args.fields])
    return await client.torrent_action(ACTIONS[args.action], args.ids)


def main(argv: Optional[List[str]] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> int:
    args = build_parser().parse_args(argv)

    auth = BasicAuth(user=args.user, password=args.password) if args.user else None
    client = TransClient(args.url, auth=auth, transport=transport, timeout=args.timeout)

    try:
        response = asyncio.run(run_command(client, args))
    except TransmissionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(response.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2))
    return 0 if response.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
