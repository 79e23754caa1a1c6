"""Configuration status display for CLI"""

from typing import List, Tuple

from rich.table import Table

from customer_auth import CustomerAuthConfig
from utils.redaction import mask_secret

SECRET_VARIABLES = ("CUSTOMER_ACCOUNT_API_CLIENT_SECRET",)


def config_rows(config: CustomerAuthConfig) -> List[Tuple[str, str, str]]:
    """
    Build (variable, status, displayed value) rows for every required setting

    Args:
        config: Auth configuration to inspect

    Returns:
        List of rows; status is "set" or "missing"
    """
    rows = []
    for name, value in config.required_fields():
        if not (value or "").strip():
            rows.append((name, "missing", ""))
        elif name in SECRET_VARIABLES:
            rows.append((name, "set", mask_secret(value, 4)))
        else:
            rows.append((name, "set", value))
    return rows


def show_config_status(config: CustomerAuthConfig, console) -> bool:
    """
    Display the auth configuration as a table

    Args:
        config: Auth configuration to inspect
        console: Rich console for output

    Returns:
        True when every required variable is set
    """
    table = Table(title="Customer Auth Configuration")
    table.add_column("Variable", style="cyan")
    table.add_column("Status")
    table.add_column("Value")

    all_set = True
    for name, status, value in config_rows(config):
        if status == "missing":
            all_set = False
            table.add_row(name, "[red]missing[/red]", "")
        else:
            table.add_row(name, "[green]set[/green]", value)

    table.add_row("Environment", config.env, "")
    table.add_row("Redirect URI", config.callback_redirect_uri, "")
    table.add_row("Token auth method", config.token_endpoint_auth_method, "")
    table.add_row("State verification", "on" if config.verify_state else "[yellow]off[/yellow]", "")

    console.print(table)
    return all_set
