"""Typer-based command line for quick Graph API and webhook checks."""

import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import asyncio
from pathlib import Path
from typing import NoReturn

import typer
from dotenv import load_dotenv

from messenger_client.client import Messenger
from messenger_client.config import MessengerConfig, get_settings
from messenger_client.exceptions import MessengerApiError
from messenger_client.models.payloads import MessagePayload
from messenger_client.signature import compute_signature, is_signature_valid

app = typer.Typer(help="Messenger Platform client utilities.")


def _load_env() -> None:
    load_dotenv(Path.cwd() / ".env")
    load_dotenv(Path.cwd() / ".env.local", override=True)


def _build_messenger() -> Messenger:
    _load_env()
    get_settings.cache_clear()
    return Messenger(MessengerConfig.from_settings(get_settings()))


def _read_payload(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _exit_on_api_error(e: MessengerApiError) -> NoReturn:
    typer.secho(f"Graph API error: {e.message}", fg=typer.colors.RED, err=True)
    if e.error_type or e.code is not None:
        typer.echo(f"  type={e.error_type} code={e.code} fbtrace_id={e.fbtrace_id}", err=True)
    raise typer.Exit(code=1)


@app.command()
def profile(user_id: str = typer.Argument(..., help="Page-scoped user ID")):
    """Print the profile of a user."""
    messenger = _build_messenger()
    try:
        user = asyncio.run(messenger.query_user_profile(user_id))
    except MessengerApiError as e:
        _exit_on_api_error(e)
    typer.echo(user.model_dump_json(indent=2, exclude_none=True))


@app.command()
def send(
    recipient_id: str = typer.Argument(..., help="Page-scoped user ID"),
    text: str = typer.Argument(..., help="Message text"),
):
    """Send a text message."""
    messenger = _build_messenger()
    try:
        response = asyncio.run(messenger.send(MessagePayload.text(recipient_id, text)))
    except MessengerApiError as e:
        _exit_on_api_error(e)
    typer.echo(f"Sent {response.message_id} to {response.recipient_id}")


@app.command()
def sign(
    payload_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    app_secret: str = typer.Option(None, envvar="MESSENGER_APP_SECRET"),
):
    """Print the X-Hub-Signature value of a webhook body."""
    if not app_secret:
        _load_env()
        app_secret = os.environ.get("MESSENGER_APP_SECRET")
    if not app_secret:
        typer.secho("MESSENGER_APP_SECRET is not set", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    typer.echo(compute_signature(_read_payload(payload_file), app_secret))


@app.command()
def verify(
    payload_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    signature: str = typer.Argument(..., help="X-Hub-Signature header value"),
    app_secret: str = typer.Option(None, envvar="MESSENGER_APP_SECRET"),
):
    """Check a webhook body against an X-Hub-Signature value."""
    if not app_secret:
        _load_env()
        app_secret = os.environ.get("MESSENGER_APP_SECRET")
    if not app_secret:
        typer.secho("MESSENGER_APP_SECRET is not set", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    if is_signature_valid(_read_payload(payload_file), signature, app_secret):
        typer.secho("Signature is valid", fg=typer.colors.GREEN)
        return
    typer.secho("Signature does not match", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
