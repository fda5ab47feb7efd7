"""CLI decorators"""

from .config import with_service, handle_errors

__all__ = ['with_service', 'handle_errors']
