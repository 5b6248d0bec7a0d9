"""
reservoir — declarative async resource cache with durable mirroring.

    from reservoir import resource as R  # Declarative + simple resources
    from reservoir import nested as N    # Tuple-keyed nested maps
    from reservoir import persist as P   # Durable storage + snapshots
"""

import logging

from reservoir import nested
from reservoir import persist
from reservoir import resource
from reservoir._types import (
    Result,
    Ok,
    Error,
    LazyCoroResult,
    Producer,
    ReservoirError,
    ArityError,
    StorageError,
    CodecError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = (
    "nested",
    "persist",
    "resource",
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    "Producer",
    "ReservoirError",
    "ArityError",
    "StorageError",
    "CodecError",
)
