import click
import datetime

from keepsake.cookies import encode_cookie_value, parse_cookie_value
from keepsake.signing import safe_unsign_value, sign_value
from keepsake.sessions import utcnow

keepsake_command = click.Group("keepsake", help="Credentials cookie tools.")


@keepsake_command.command("encode")
@click.option("--remember-for", type=int, help="Remember the session for this many seconds.")
@click.argument("persistence_token")
@click.argument("record_key")
def encode_command(persistence_token: str, record_key: str, remember_for: int | None) -> None:
    """Build a credentials cookie value."""
    expires_at = utcnow() + datetime.timedelta(seconds=remember_for) if remember_for else None
    click.echo(encode_cookie_value(persistence_token, record_key, expires_at))


@keepsake_command.command("decode")
@click.argument("value")
def decode_command(value: str) -> None:
    """Print the fields of a credentials cookie value."""
    credentials = parse_cookie_value(value)
    if credentials is None:
        raise click.ClickException("Malformed credentials cookie.")

    click.echo(f"persistence_token: {credentials.persistence_token}")
    click.echo(f"record_key: {credentials.record_key or '-'}")
    click.echo(f"expires_at: {credentials.expires_at or 'session'}")


@keepsake_command.command("sign")
@click.option("--secret-key", envvar="KEEPSAKE_SECRET_KEY", required=True)
@click.argument("value")
def sign_command(secret_key: str, value: str) -> None:
    """Sign a cookie value."""
    click.echo(sign_value(secret_key, value))


@keepsake_command.command("unsign")
@click.option("--secret-key", envvar="KEEPSAKE_SECRET_KEY", required=True)
@click.argument("value")
def unsign_command(secret_key: str, value: str) -> None:
    """Verify signature and print the cookie value."""
    ok, unsigned = safe_unsign_value(secret_key, value)
    if not ok:
        raise click.ClickException("Bad signature.")
    click.echo(unsigned)


def main() -> None:  # pragma: nocover
    keepsake_command()
