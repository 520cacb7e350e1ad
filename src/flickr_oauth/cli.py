"""
Click CLI for Flickr OAuth.

Commands:
    flickr-oauth authorize   Validate existing tokens or run the handshake
    flickr-oauth check       Validate existing tokens only

Configuration is read from the environment (FLICKR_API_KEY,
FLICKR_API_SECRET, and optionally FLICKR_USER_ID, FLICKR_ACCESS_TOKEN,
FLICKR_ACCESS_TOKEN_SECRET from a previous run).
"""

import logging
import sys
import webbrowser
from typing import Optional

import click

from .config import FlickrOAuthConfig
from .controller import AuthController
from .exceptions import ConfigurationError
from .sinks import ConsoleExportSink, DotEnvFileSink, chain_sinks
from .tokens import TokenPair
from .validator import TokenStatus, TokenValidator

logger = logging.getLogger(__name__)


def print_error(message: str) -> None:
    """Print error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def print_success(message: str) -> None:
    """Print success message."""
    click.secho(message, fg="green")


def load_config() -> FlickrOAuthConfig:
    """Load configuration, exiting with status 2 if it is missing."""
    try:
        return FlickrOAuthConfig.from_env()
    except ConfigurationError as e:
        print_error(str(e))
        sys.exit(2)


def prompt_verifier(open_browser: bool):
    """Build a verifier supplier that shows the URL and prompts for the code."""

    def supplier(authorization_url: str) -> str:
        click.echo()
        click.echo("Authorize this application by visiting:")
        click.secho(f"  {authorization_url}", bold=True)
        click.echo()
        if open_browser:
            try:
                webbrowser.open(authorization_url)
            except webbrowser.Error as e:
                logger.warning(f"Could not open browser automatically: {e}")
        return click.prompt("Verifier code").strip()

    return supplier


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def cli(verbose: bool) -> None:
    """Negotiate and validate Flickr OAuth 1.0a credentials."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.option(
    "--open-browser/--no-browser",
    default=True,
    help="Open the authorization page automatically",
)
@click.option(
    "--dotenv",
    "dotenv_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also append the negotiated credentials to this file",
)
@click.option("--silent", is_flag=True, help="Don't print export statements")
def authorize(open_browser: bool, dotenv_path: Optional[str], silent: bool) -> None:
    """Validate existing tokens or run the OAuth handshake."""
    config = load_config()

    sinks = []
    if not silent:
        sinks.append(ConsoleExportSink())
    if dotenv_path:
        sinks.append(DotEnvFileSink(dotenv_path))

    controller = AuthController(
        config,
        verifier_supplier=prompt_verifier(open_browser),
        credential_sink=chain_sinks(*sinks),
    )

    try:
        result = controller.authenticate(token_pair=TokenPair.from_env())
    except ConfigurationError as e:
        print_error(str(e))
        sys.exit(2)

    if not result.success:
        print_error(str(result.error))
        sys.exit(1)

    print_success(f"Authenticated as {result.token_pair.user_id} ({result.outcome.value})")


@cli.command()
def check() -> None:
    """Validate the tokens in the environment without negotiating."""
    config = load_config()
    validator = TokenValidator(config)

    result = validator.check_token(config.credentials, TokenPair.from_env())

    if result.status is TokenStatus.VALID:
        perms = f" (perms: {result.perms})" if result.perms else ""
        print_success(f"Access token is valid{perms}")
        return

    if result.status is TokenStatus.NETWORK_ERROR:
        print_error(f"Could not reach Flickr: {result.detail}")
        sys.exit(2)

    print_error(f"Access token is invalid: {result.detail}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
