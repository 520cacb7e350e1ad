"""
Credential sinks for newly negotiated tokens.

A sink is any callable taking a :class:`~flickr_oauth.tokens.TokenPair`.
The controller calls it once after a successful handshake; it never writes
credentials anywhere on its own.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from .exceptions import CredentialSinkError
from .tokens import TokenPair

logger = logging.getLogger(__name__)


def export_lines(token_pair: TokenPair) -> List[str]:
    """Render ``export KEY="value"`` shell lines for a token pair."""
    return [f'export {key}="{value}"' for key, value in token_pair.to_env().items()]


class ConsoleExportSink:
    """Print shell export statements so the user can persist the tokens."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def __call__(self, token_pair: TokenPair) -> None:
        stream = self.stream or sys.stdout
        print("\nAdd the following variables to your environment:\n", file=stream)
        for line in export_lines(token_pair):
            print(line, file=stream)
        print(file=stream)


class DotEnvFileSink:
    """
    Append export statements to a ``.env`` file.

    The file is created if it does not exist and restricted to user
    read/write (600).
    """

    def __init__(self, path: str = ".env"):
        self.path = Path(path)

    def __call__(self, token_pair: TokenPair) -> None:
        """
        Append the token pair to the file.

        Raises:
            CredentialSinkError: If the file cannot be written
        """
        try:
            existing = self.path.read_text() if self.path.exists() else ""
            if existing and not existing.endswith("\n"):
                existing += "\n"
            content = existing + "\n".join(export_lines(token_pair)) + "\n"
            self.path.write_text(content)
        except (IOError, OSError) as e:
            logger.error(f"Failed to write credentials to {self.path}: {e}")
            raise CredentialSinkError(f"Failed to write credentials: {e}") from e

        try:
            self.path.chmod(0o600)
        except (OSError, PermissionError) as e:
            logger.warning(f"Could not set secure permissions: {e}")

        logger.info(f"Credentials written to {self.path}")


def chain_sinks(*sinks: Callable[[TokenPair], None]) -> Callable[[TokenPair], None]:
    """Combine several sinks into one that calls each in order."""

    def sink(token_pair: TokenPair) -> None:
        for each in sinks:
            each(token_pair)

    return sink
