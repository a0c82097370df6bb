"""Command-line interface for the AuraNode web front end."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

from dotenv import load_dotenv

from auranode.config import DEFAULT_PORT, Settings, load_settings
from auranode.panel import PanelClient

logger = logging.getLogger("auranode.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="AuraNode website utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the website")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address for the website")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"Port to listen on (default: $PORT or {DEFAULT_PORT})",
    )

    lookup_parser = subparsers.add_parser(
        "lookup-user", help="Look up a panel account by email address"
    )
    lookup_parser.add_argument("email", help="Email address registered on the panel")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "lookup-user"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _serve(settings: Settings, *, host: str, port: int | None) -> None:
    import uvicorn

    from auranode import create_app

    bind_port = port if port is not None else settings.port
    app = create_app(settings)
    logger.info("Server is running on http://localhost:%s", bind_port)
    uvicorn.run(app, host=host, port=bind_port, proxy_headers=True)


async def _lookup_user(settings: Settings, email: str) -> int:
    panel = PanelClient.from_settings(settings)
    try:
        result = await panel.find_user_by_email(email)
    finally:
        await panel.aclose()

    if not result.success:
        print(result.message)
        return 1

    user = result.value
    print(f"{user.id}\t{user.username}\t{user.email}")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    load_dotenv()

    args = _parse_args(argv)
    try:
        settings = load_settings()
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from exc

    if args.command == "serve":
        _serve(settings, host=args.host, port=args.port)
    elif args.command == "lookup-user":
        raise SystemExit(asyncio.run(_lookup_user(settings, args.email)))


if __name__ == "__main__":
    main()
