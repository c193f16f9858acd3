"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import logging
import click
from functools import wraps

from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)

logger = logging.getLogger(__name__)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Commands write their own data to stdout
    - Errors become a JSON object on stdout and a log line on stderr
    - Exit codes follow exit_codes (CommandError carries its own)
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            func(*args, **kwargs)
        except KeyboardInterrupt:
            logger.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            logger.error(str(e))
            error_obj = {
                "error": str(e),
                "type": type(e).__name__,
                "exit_code": e.exit_code
            }
            # Add extra fields for PartialSuccessError
            if hasattr(e, 'succeeded'):
                error_obj['succeeded'] = e.succeeded
                error_obj['failed'] = e.failed
            print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.error(f"Command failed: {e}")
            error_obj = {
                "error": str(e),
                "type": type(e).__name__
            }
            print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(get_exit_code_for_exception(e))

        sys.exit(SUCCESS)

    return wrapper


# Standard options that many commands share
common_options = {
    'pretty': click.option('--pretty', is_flag=True,
                           help='Display results as a formatted table'),
    'limit': click.option('--limit', type=int, default=None,
                          help='Maximum fuzzy candidates per catalog'),
    'timeout': click.option('--timeout', type=float, default=None,
                            help='Registry request timeout in seconds'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('pretty', 'limit')
        def my_command(pretty, limit):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
