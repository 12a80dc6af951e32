"""Console interface for ``booking_decoder``.

A Typer app for inspecting how a single purpose string decodes. Environment
overrides (log level, alignment periods) are loaded from a local ``.env``
using ``python-dotenv`` before any command runs. Business logic lives in
``booking_decoder.preprocessors`` and ``booking_decoder.identity``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv

from .config import settings_from_env
from .errors import DecodeError
from .identity import assign_identity, canonical_payload
from .logging_setup import configure_logging
from .mapping import assemble_remitted_name
from .models import BankFamily, Booking
from .preprocessors import decode_booking

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Decode bank purpose text into structured booking fields. "
        "Loads overrides from a local .env before running."
    ),
)


def _booking_view(booking: Booking) -> dict[str, Any]:
    view: dict[str, Any] = {"Id": booking.id}
    view.update(canonical_payload(booking))
    return view


@app.command("decode")
def decode_cmd(
    purpose: Annotated[str, typer.Argument(help="Raw purpose text as exported by the bank.")],
    family: Annotated[
        str,
        typer.Option(
            "--family",
            "-f",
            help="Bank family or bank name (e.g. commerzbank, sparda-bw, psd).",
        ),
    ] = BankFamily.TRAILING_SEPA.value,
    name: Annotated[
        str | None, typer.Option("--name", help="Remitted name delivered with the record.")
    ] = None,
    name_addition: Annotated[
        str | None,
        typer.Option("--name-addition", help="Continuation field of the remitted name."),
    ] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Override BOOKING_DECODER_LOG_LEVEL.")
    ] = None,
) -> None:
    """Decode one purpose string and print the populated fields as JSON."""

    try:
        configure_logging(log_level)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e

    try:
        bank_family = BankFamily.from_name(family)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e

    try:
        settings = settings_from_env()
    except ValueError as e:
        typer.echo(f"Error: invalid settings: {e}", err=True)
        raise typer.Exit(2) from e

    booking = Booking(
        remittance_information=purpose,
        remitted_name=assemble_remitted_name(name, name_addition, settings.name_column_width),
    )
    try:
        decode_booking(booking, bank_family, settings=settings)
    except DecodeError as e:
        typer.echo(f"Error: {e.__class__.__name__}: {e}", err=True)
        raise typer.Exit(1) from e

    assign_identity(booking, set())
    typer.echo(json.dumps(_booking_view(booking), indent=2, ensure_ascii=False))


@app.command("families")
def families_cmd() -> None:
    """List the accepted bank family values."""

    for family in BankFamily:
        typer.echo(family.value)


@app.callback()
def _root() -> None:
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)


def main() -> None:  # pragma: no cover - thin wrapper
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
