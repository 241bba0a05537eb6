"""CLI for cloud-profile."""

import asyncio
import logging
import os
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import ProfileConfig, load_profile_config
from .environment import Environment
from .errors import ProfileError
from .models import ServicePrincipalLogin, UserLogin
from .parameters import ENDPOINT_PARAMETERS, get_parameter
from .store import EnvironmentStore


app = typer.Typer(help="""\
Cloud environments and account login. Inspect the built-in clouds, define
custom environments, and list the subscriptions a set of credentials can use.""")

env_app = typer.Typer(help="Manage cloud environments")
app.add_typer(env_app, name="env")

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def _get_store() -> EnvironmentStore:
    config = load_profile_config()
    return EnvironmentStore(config.environments_path, client_id=config.client_id)


def _fail(error: Exception) -> None:
    """Print a package error and exit with status 1."""
    console.print(f"[red]✗ {error}[/red]")
    raise typer.Exit(1)


def _parse_params(params: List[str]) -> dict:
    """Parse repeated key=value options into a parameter dict."""
    values = {}
    for item in params:
        if "=" not in item:
            raise typer.BadParameter(f"Expected key=value, got '{item}'", param_hint="--param")
        key, value = item.split("=", 1)
        values[get_parameter(key.strip()).name] = value.strip()
    return values


# ---- env commands ----------------------------------------------------------

@env_app.command("list")
def env_list():
    """List public and custom environments."""
    try:
        envs = _get_store().list()
    except ProfileError as e:
        _fail(e)

    table = Table(title="Environments")
    table.add_column("Name", style="cyan")
    table.add_column("Public")
    for env in envs:
        table.add_row(env.name, "yes" if env.is_public_environment else "no")
    console.print(table)


@env_app.command("show")
def env_show(
    name: str = typer.Argument(..., help="Environment name"),
):
    """Show the parameters of an environment."""
    try:
        env = _get_store().get(name)
    except ProfileError as e:
        _fail(e)

    table = Table(title=f"Environment {env.name}")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value")
    table.add_column("Environment variable", style="dim")
    for param, stored, override in env.describe():
        if override:
            value = f"{override} [yellow](from {param.environment_variable})[/yellow]"
        elif stored is None:
            value = "[dim]not set[/dim]"
        else:
            value = stored
        table.add_row(param.name, value, param.environment_variable)
    console.print(table)


@env_app.command("add")
def env_add(
    name: str = typer.Argument(..., help="Name of the new environment"),
    params: List[str] = typer.Option([], "--param", "-p", help="Parameter value as key=value (repeatable)"),
    base: Optional[str] = typer.Option(None, "--from", help="Copy values from an existing environment"),
):
    """Add a custom environment."""
    store = _get_store()
    try:
        values = dict(store.get(base).values) if base else {}
        values.update(_parse_params(params))
        env = store.add(Environment(name, values, client_id=store.client_id))
    except ProfileError as e:
        _fail(e)

    missing = [p.name for p in ENDPOINT_PARAMETERS if env.values[p.name] is None]
    console.print(f"[green]✓[/green] Added environment {name}")
    if missing:
        console.print(f"[dim]Not set: {', '.join(missing)}[/dim]")


@env_app.command("set")
def env_set(
    name: str = typer.Argument(..., help="Environment name"),
    parameter: str = typer.Argument(..., help="Parameter name (e.g. portalUrl)"),
    value: str = typer.Argument(..., help="New value"),
):
    """Set a parameter on a custom environment."""
    try:
        env = _get_store().set_value(name, parameter, value)
    except ProfileError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Set {parameter} on {env.name}")
    param = get_parameter(parameter)
    if os.environ.get(param.environment_variable):
        console.print(
            f"[yellow]⚠ {param.environment_variable} is set and overrides this value[/yellow]"
        )


@env_app.command("delete")
def env_delete(
    name: str = typer.Argument(..., help="Environment name"),
):
    """Delete a custom environment."""
    try:
        _get_store().remove(name)
    except ProfileError as e:
        _fail(e)
    console.print(f"[green]✓[/green] Deleted environment {name}")


# ---- login -----------------------------------------------------------------

@app.command()
def login(
    username: str = typer.Option(..., "--username", "-u", help="User name, or client id with --service-principal"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, help="Password or client secret"),
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant (required for service principals)"),
    environment: Optional[str] = typer.Option(None, "--environment", "-e", help="Environment name"),
    service_principal: bool = typer.Option(False, "--service-principal", help="Log in as a service principal"),
):
    """Log in and list the available subscriptions."""
    config: ProfileConfig = load_profile_config()
    store = EnvironmentStore(config.environments_path, client_id=config.client_id)

    if service_principal and not tenant:
        console.print("[red]✗ --tenant is required with --service-principal[/red]")
        raise typer.Exit(1)

    try:
        env = store.get(environment or config.default_environment)
        if service_principal:
            creds = ServicePrincipalLogin(client_id=username, secret=password, tenant=tenant)
        else:
            creds = UserLogin(username=username, password=password, tenant=tenant)
        subscriptions = asyncio.run(env.add_account(creds))
    except ProfileError as e:
        _fail(e)

    if not subscriptions:
        console.print(f"[yellow]No subscriptions found for {username} in {env.name}[/yellow]")
        return

    table = Table(title=f"Subscriptions ({env.name})")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Tenant", style="dim")
    for sub in subscriptions:
        table.add_row(sub.id or "", sub.name or "[dim]unnamed[/dim]", sub.tenant_id or "")
    console.print(table)


if __name__ == "__main__":
    app()
