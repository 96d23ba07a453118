"""Decorators for klaw-iter.

- safe_async: Catch exceptions from an async call and return Err
"""

from klaw_iter.decorators.safe import safe_async

__all__ = ['safe_async']
