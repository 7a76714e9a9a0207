"""Server handlers for CLI"""

from typing import Optional

from server import PublisherServer
import settings


def serve(console, bind_address: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """
    Run the HTTP API in the foreground until interrupted

    Args:
        console: Rich console for output
        bind_address: Override for BIND_ADDRESS
        port: Override for PORT
        debug: Whether debug mode is enabled (logging is already configured by the CLI)
    """
    server = PublisherServer(bind_address=bind_address, port=port)
    server.debug = debug

    if not settings.X_CLIENT_ID:
        console.print("[yellow]X_CLIENT_ID is not set; auth endpoints will return 500[/yellow]")

    console.print(f"[green][OK][/green] Serving on http://{server.bind_address}:{server.port}")
    console.print("  Health:  /health")
    console.print("  Auth:    /api/x/auth/*")
    console.print("  Publish: /api/x/post")
    server.run()
