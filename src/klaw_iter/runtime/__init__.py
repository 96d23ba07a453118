"""
klaw_iter.runtime: configuration, structured logging and error types.

The iteration operations read this module's configuration on every call; nothing
here has to be initialized before they are used.
"""

from klaw_iter.runtime._config import Backend, IterConfig, get_config, init, reset, run
from klaw_iter.runtime._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    is_logging_configured,
    remove_log_hook,
)
from klaw_iter.runtime.errors import (
    ConfigError,
    ConfigInvalid,
    ElementFailed,
    NotAwaitable,
    NotAwaitableError,
)

__all__ = [
    # Config
    'Backend',
    # Errors
    'ConfigError',
    'ConfigInvalid',
    'ElementFailed',
    'IterConfig',
    'NotAwaitable',
    'NotAwaitableError',
    # Logging
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_config',
    'get_logger',
    'init',
    'is_logging_configured',
    'remove_log_hook',
    'reset',
    'run',
]
