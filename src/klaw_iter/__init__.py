"""klaw-iter: Order-preserving async iteration over sequences for Python 3.12+.

Apply an async operation to every element of a sequence, either one element
at a time (sequential_*) or with one task per element (concurrent_*). Output
order always follows input order, and the first error aborts the call.

Flat imports (preferred):
    from klaw_iter import concurrent_map, sequential_for_each, safe_async

Submodule imports (for organization):
    from klaw_iter.concurrent import concurrent_filter
    from klaw_iter.sequential import sequential_compact_map
    from klaw_iter.runtime import init, configure_logging
"""

# Concurrent operations
from klaw_iter.concurrent import (
    concurrent_compact_map,
    concurrent_filter,
    concurrent_flat_map,
    concurrent_for_each,
    concurrent_map,
)

# Decorators
from klaw_iter.decorators import safe_async

# Outcome types
from klaw_iter.result import Err, Ok, Result

# Sequential operations
from klaw_iter.sequential import (
    sequential_compact_map,
    sequential_filter,
    sequential_flat_map,
    sequential_for_each,
    sequential_map,
)

__all__ = [
    'Err',
    'Ok',
    'Result',
    'concurrent_compact_map',
    'concurrent_filter',
    'concurrent_flat_map',
    'concurrent_for_each',
    'concurrent_map',
    'safe_async',
    'sequential_compact_map',
    'sequential_filter',
    'sequential_flat_map',
    'sequential_for_each',
    'sequential_map',
]
