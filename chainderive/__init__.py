"""Availability-aware, lazily built derive queries for chain API clients.

>>> from chainderive import StaticChainContext, get_available_derives
>>> ctx = StaticChainContext({"society": {...}}, runtime_name="kusama")
>>> derived = get_available_derives("api-1", ctx)
>>> derived.society.info()
"""

from chainderive._version import __version__
from chainderive.availability import AVAILABILITY_RULES, AvailabilityRule, is_included
from chainderive.bundle import (
    DerivedObject,
    availability_report,
    compose_derives,
    get_available_derives,
)
from chainderive.core.chain_context import ChainContext, StaticChainContext
from chainderive.lazy import LazyGroup
from chainderive.registry import get_builtin_registry, register_derive

__all__ = (
    # Methods
    "get_available_derives",
    "compose_derives",
    "availability_report",
    "is_included",
    "get_builtin_registry",
    "register_derive",
    # Classes
    "AvailabilityRule",
    "ChainContext",
    "StaticChainContext",
    "DerivedObject",
    "LazyGroup",
    # Constants
    "AVAILABILITY_RULES",
    "__version__",
)
