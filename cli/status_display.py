"""Status display functionality for CLI"""

from rich.table import Table
from utils.storage import TokenStorage


def show_token_status(storage: TokenStorage, console):
    """
    Display stored token status (no secrets)

    Args:
        storage: TokenStorage instance
        console: Rich console for output
    """
    status = storage.get_status()

    table = Table(title="Token Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Has Tokens", "Yes" if status["has_tokens"] else "No")

    if status["has_tokens"]:
        table.add_row("Refresh Token", "Yes" if status["has_refresh_token"] else "No")
        table.add_row("Saved At", status["saved_at"] or "unknown")
        if status["expires_in"] is not None:
            table.add_row("Issued Lifetime", f"{status['expires_in'] // 60}m")
        if status["scope"]:
            table.add_row("Scope", status["scope"])

        identity = status["identity"]
        if identity:
            table.add_row("Account", f"@{identity['handle']} ({identity['display_name']})")
        else:
            table.add_row("Account", "unknown (run whoami)")

    table.add_row("Token File", str(storage.token_file))

    console.print(table)

