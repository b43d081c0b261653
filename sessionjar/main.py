from __future__ import annotations

import argparse
import sys

from sessionjar.api.models import AuthenticationError, SessionJarError
from sessionjar.config import STORAGE_FILE, ensure_dirs, load_config
from sessionjar.output import make_error, output_error
from sessionjar.storage import FileStorage


def create_parser() -> argparse.ArgumentParser:
    from sessionjar import __version__

    # Shared flags that every subcommand inherits
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--format",
        choices=["text", "json", "tsv"],
        default=None,
        help="Output format (default: text)",
    )
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show progress and debug info on stderr",
    )

    parser = argparse.ArgumentParser(
        prog="sessionjar",
        description="Session cookie jar for HTTP clients without one",
        parents=[common],
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # --- parse ---
    sp_parse = sub.add_parser(
        "parse", parents=[common],
        help="Parse a Set-Cookie header and show each cookie",
    )
    sp_parse.add_argument(
        "header", nargs="?", default=None,
        help="Set-Cookie header text (read from stdin when omitted or '-')",
    )
    sp_parse.add_argument(
        "--columns", default=None,
        help="Comma-separated columns (default: name,value,expiresAt,domain,path)",
    )

    # --- store ---
    sp_store = sub.add_parser(
        "store", parents=[common],
        help="Merge a Set-Cookie header into the stored session",
    )
    sp_store.add_argument(
        "header", nargs="?", default=None,
        help="Set-Cookie header text (read from stdin when omitted or '-')",
    )
    sp_store.add_argument(
        "--all", action="store_true", default=False,
        help="Store even if the header has no cookies matching cookiePrefix",
    )

    # --- cookie ---
    sub.add_parser("cookie", parents=[common], help="Print the Cookie header for the stored session")

    # --- clear ---
    sub.add_parser("clear", parents=[common], help="Sign out locally: clear stored cookies and session cache")

    # --- request ---
    sp_request = sub.add_parser(
        "request", parents=[common],
        help="Send a request to the auth server with the stored session",
    )
    sp_request.add_argument("path", help="Path relative to baseUrl (e.g. /get-session) or full URL")
    sp_request.add_argument("--method", "-X", default="GET", help="HTTP method (default: GET)")
    sp_request.add_argument("--data", "-d", default=None, help="JSON request body")

    # --- config ---
    sp_config = sub.add_parser("config", parents=[common], help="Manage configuration")
    config_sub = sp_config.add_subparsers(dest="config_action", required=True)

    config_sub.add_parser("show", parents=[common], help="Show current configuration")

    sp_set = config_sub.add_parser("set", parents=[common], help="Update configuration")
    sp_set.add_argument("--base-url", dest="base_url", help="Auth server base URL")
    sp_set.add_argument("--scheme", help="App URL scheme, sent as Origin: <scheme>://")
    sp_set.add_argument("--storage-prefix", dest="storage_prefix", help="Prefix for storage keys")
    sp_set.add_argument(
        "--cookie-prefix", dest="cookie_prefix",
        help=(
            "Server cookie name prefix(es), comma-separated. An empty value matches "
            "any cookie ending in session_token or session_data instead of "
            "falling back to the default prefix"
        ),
    )
    sp_set.add_argument(
        "--disable-cache", dest="disable_cache",
        action=argparse.BooleanOptionalAction, default=None,
        help="Do not cache get-session responses",
    )
    sp_set.add_argument(
        "--debug", dest="debug",
        action=argparse.BooleanOptionalAction, default=None,
        help="Always log debug info on stderr",
    )
    sp_set.add_argument("--output-format", dest="output_format", choices=["text", "json", "tsv"])

    return parser


def main() -> int:
    ensure_dirs()
    parser = create_parser()
    args = parser.parse_args()

    config = load_config()
    args.format = args.format or config.outputFormat or "text"

    try:
        if args.command == "parse":
            from sessionjar.commands.cookies import handle_parse
            return handle_parse(args)

        if args.command == "config":
            from sessionjar.commands.config_cmd import (
                handle_config_set,
                handle_config_show,
            )
            match args.config_action:
                case "show":
                    return handle_config_show(args)
                case "set":
                    return handle_config_set(args)

        # Commands that need the stored session
        from sessionjar.api.client import SessionClient
        with SessionClient(config, FileStorage(STORAGE_FILE), verbose=args.verbose) as client:
            match args.command:
                case "store":
                    from sessionjar.commands.cookies import handle_store
                    return handle_store(args, client, config)
                case "cookie":
                    from sessionjar.commands.cookies import handle_cookie
                    return handle_cookie(args, client)
                case "clear":
                    from sessionjar.commands.cookies import handle_clear
                    return handle_clear(args, client)
                case "request":
                    from sessionjar.commands.request import handle_request
                    return handle_request(args, client, config)

    except AuthenticationError as exc:
        output_error([make_error(
            message=exc.message,
            code=exc.code,
            userMessage=exc.userMessage,
        )])
        return 2

    except SessionJarError as exc:
        output_error([make_error(
            message=exc.message,
            code=exc.code,
            path=exc.path,
            userMessage=exc.userMessage,
        )])
        return 1

    except Exception as exc:
        output_error([make_error(
            message=str(exc),
            code=type(exc).__name__,
            userMessage="An unexpected error occurred.",
        )])
        return 1

    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
