"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import logging
import sys
import click
from functools import wraps
from typing import Any, Iterable

from .exceptions import GitPlumbError
from .exit_codes import INTERRUPTED, get_exit_code_for_exception

logger = logging.getLogger("gitplumb")


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)
        ],
        force=True,
    )


def standard_command(func):
    """
    Decorator that provides standard CLI error handling:
    - gitplumb errors print "error: <message>" on stderr and exit with
      the error's exit code
    - Ctrl+C exits with 130
    - Click exceptions pass through untouched
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except GitPlumbError as e:
            logger.debug(f"{type(e).__name__}: {e}")
            click.echo(f"error: {e}", err=True)
            sys.exit(e.exit_code)
        except OSError as e:
            click.echo(f"error: {e}", err=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def output_jsonl(items: Iterable[Any]) -> None:
    """Print each item as one line of JSON."""
    for item in items:
        print(json.dumps(item, ensure_ascii=False), flush=True)
