"""CLI decorators for configuration loading and error reporting."""

import logging
import sys
from functools import wraps

import click

from gml.sdk.config import load_config
from gml.sdk.exceptions import GmlError

logger = logging.getLogger(__name__)


def report_errors(f):
    """
    Decorator that turns gml errors into a one-line message and exit code 1.

    Ctrl-C is reported as a cancellation with exit code 130. Tracebacks are
    only logged at DEBUG level.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except KeyboardInterrupt:
            click.secho("Error: operation cancelled", fg="red", err=True)
            sys.exit(130)
        except GmlError as e:
            logger.debug(f"{f.__name__} failed", exc_info=True)
            click.secho(f"Error: {e}", fg="red", err=True)
            sys.exit(1)
    return decorated_function


def pass_config(f):
    """
    Decorator that loads the configuration named by the group's --config
    option and passes it to the command as its first argument.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        ctx = click.get_current_context()
        config_path = (ctx.obj or {}).get("config_path")
        config = load_config(config_path)
        return f(config, *args, **kwargs)
    return decorated_function
