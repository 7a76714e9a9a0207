"""CLI entry point and argument parsing"""

import argparse
import asyncio
import sys

from rich.console import Console

import settings
from publisher import PublishPipeline
from utils.storage import TokenStorage
from x_oauth import AuthSession
from cli import auth_handlers, post_handlers
from cli.debug_setup import setup_debug_console
from cli.status_display import show_token_status


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="x-publisher", description="Publish posts to X from the command line")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--token-file", default=None, help="Override token file (default: from config)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login", help="Log in to X in the browser")
    login_parser.add_argument("--no-browser", action="store_true", help="Print the URL instead of opening it")
    login_parser.add_argument("--timeout", type=int, default=300, help="Seconds to wait for the redirect")

    subparsers.add_parser("status", help="Show stored token status")
    subparsers.add_parser("whoami", help="Show the logged in account")
    subparsers.add_parser("refresh", help="Refresh the stored access token")
    subparsers.add_parser("logout", help="Revoke and clear stored tokens")

    post_parser = subparsers.add_parser("post", help="Publish a post")
    post_parser.add_argument("text", help="Post text (up to 280 characters)")
    media_group = post_parser.add_mutually_exclusive_group()
    media_group.add_argument("--image-url", default=None, help="Attach an image downloaded from a URL")
    media_group.add_argument("--image-file", default=None, help="Attach a local image file")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    serve_parser.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")

    return parser


def run_command(args, console) -> bool:
    """Dispatch a parsed command; returns True on success"""
    if args.command == "serve":
        from cli.server_handlers import serve
        serve(console, bind_address=args.bind, port=args.port, debug=args.debug)
        return True

    storage = TokenStorage(args.token_file)

    if args.command == "status":
        show_token_status(storage, console)
        return True

    config = settings.get_x_config()
    session = AuthSession(config)

    if args.command == "login":
        return asyncio.run(auth_handlers.login(
            session, storage, console, open_browser=not args.no_browser, timeout=args.timeout
        ))
    if args.command == "whoami":
        return asyncio.run(auth_handlers.whoami(session, storage, console))
    if args.command == "refresh":
        return asyncio.run(auth_handlers.refresh(session, storage, console))
    if args.command == "logout":
        return asyncio.run(auth_handlers.logout(session, storage, console))
    if args.command == "post":
        pipeline = PublishPipeline(config)
        return asyncio.run(post_handlers.post(
            pipeline, session, storage, console, args.text,
            image_url=args.image_url, image_file=args.image_file,
        ))

    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None):
    """Entry point for the CLI"""
    global console
    args = build_parser().parse_args(argv)
    console = setup_debug_console(args.debug)

    try:
        ok = run_command(args, console)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
