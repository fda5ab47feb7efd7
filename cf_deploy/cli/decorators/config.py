"""Configuration context decorator for CLI commands"""

from functools import wraps
from typing import Callable

import click

from ..utils.output import print_error
from ...api.exceptions import CfDeployError


def with_service(func: Callable) -> Callable:
    """Decorator that loads configuration and passes the DeployService

    This decorator:
    1. Loads configuration through the CLI context
    2. Calls the command with the service as first argument
    3. Reports CfDeployError on stderr and exits with status 1

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            service = ctx.obj.service
            return func(service, *args, **kwargs)
        except CfDeployError as e:
            print_error(str(e))
            ctx.exit(1)

    return wrapper


def handle_errors(func: Callable) -> Callable:
    """Decorator for commands that do not need configuration

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except CfDeployError as e:
            print_error(str(e))
            ctx.exit(1)

    return wrapper
