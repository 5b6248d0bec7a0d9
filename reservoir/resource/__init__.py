"""
Resource — declarative async memoization.

    from reservoir import resource as R

    users = R.keyed(fetch_user, arity=1).build()
    user = await users.fetch(user_id)      # produce once, then cached

    match users.read(user_id):             # suspense style
        case R.Ready(user): ...
        case R.Failed(error): ...
        case R.Pending() as pending: await pending
"""

from __future__ import annotations

from reservoir.resource._types import (
    Status,
    Ready,
    Failed,
    Pending,
    Lookup,
    Suspended,
    Entries,
    Entry,
    EntryTree,
    Cell,
)
from reservoir.resource._config import Config, hold
from reservoir.resource._declarative import (
    DeclarativeResource,
    Resource,
    KeyedResource,
)
from reservoir.resource._simple import SimpleResource
from reservoir.resource._builder import (
    ResourceBuilder,
    create_simple_resource,
    create_declarative_resource,
    simple,
    declarative,
    keyed,
)
from reservoir.resource._ops import until_ready

__all__ = (
    # Types
    "Status",
    "Ready",
    "Failed",
    "Pending",
    "Lookup",
    "Suspended",
    "Entries",
    "Entry",
    "EntryTree",
    "Cell",
    # Config
    "Config",
    "hold",
    # Resources
    "DeclarativeResource",
    "Resource",
    "KeyedResource",
    "SimpleResource",
    # Construction
    "ResourceBuilder",
    "create_simple_resource",
    "create_declarative_resource",
    "simple",
    "declarative",
    "keyed",
    # Ops
    "until_ready",
)
