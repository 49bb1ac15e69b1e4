"""Lazy materialization of derive groups.

A derive group is a table of factories, one per method. Building every
method of every group up front would cost setup proportional to the whole
registry, while a typical client touches a handful of them. ``LazyGroup``
instead exposes each method as an ordinary member that is constructed by its
factory on first access and cached for the lifetime of the group.

Classes
-------
LazyGroup : Derive group whose methods are built on first access.

Functions
---------
materialized : Names of the methods of a group constructed so far.

"""

import logging
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping

from chainderive.core.constants import UNSET
from chainderive.util.utils import missing_name_message

# Module logger
logger = logging.getLogger(__name__)


class LazyGroup:
    """Derive group whose methods are built on first access.

    Parameters
    ----------
    name : str
        Name of the derive group, used in messages.
    methods : mapping
        Method name -> factory. Each factory is called as
        ``factory(caller_id, context)`` and returns the ready-to-call method.
    caller_id : object
        Identity of the owning client, passed through to every factory.
    context : ChainContext
        The connected chain, passed through to every factory.

    Notes
    -----
    - Each factory is invoked at most once per group, even when several
      threads race on the first access of the same method.
    - If a factory raises, the exception propagates to the caller and nothing
      is cached; the next access tries again.
    - The class only defines dunders and ``_``-prefixed attributes, so every
      public name resolves to a method of the group, including ``keys`` or
      ``name``. Methods are also reachable as items (``group["info"]``),
      which is the only way to reach a method whose name starts with ``_``.
    - ``len``, iteration and ``in`` work over method names without
      constructing anything.

    Examples
    --------
    >>> group = LazyGroup("society", {"info": make_info}, "api-1", ctx)
    >>> materialized(group)
    frozenset()
    >>> group.info is group.info
    True

    """

    def __init__(
        self,
        name: str,
        methods: Mapping[str, Callable],
        caller_id: Any,
        context: Any,
    ):
        self._name = name
        self._methods = MappingProxyType(dict(methods))
        self._caller_id = caller_id
        self._context = context
        self._cache: Dict[str, Any] = {}
        # Re-entrant so a factory may read a sibling method of its own group
        self._lock = threading.RLock()

    def _missing(self, method: str) -> str:
        return missing_name_message(
            "method", method, f"Derive group '{self._name}'", self._methods
        )

    def __getitem__(self, method: str) -> Any:
        # Fast path: already constructed, no lock needed
        value = self._cache.get(method, UNSET)
        if value is not UNSET:
            return value

        if method not in self._methods:
            raise KeyError(self._missing(method))

        # Slow path: acquire lock for construction
        with self._lock:
            # Double-check after acquiring lock
            value = self._cache.get(method, UNSET)
            if value is UNSET:
                logger.debug("Constructing derive method '%s.%s'", self._name, method)
                value = self._methods[method](self._caller_id, self._context)
                self._cache[method] = value
        return value

    def __getattr__(self, method: str) -> Any:
        # Only reached for names that are not real attributes
        if method.startswith("_"):
            raise AttributeError(method)
        if method not in self._methods:
            raise AttributeError(self._missing(method))
        return self[method]

    def __iter__(self) -> Iterator[str]:
        return iter(self._methods)

    def __len__(self) -> int:
        return len(self._methods)

    def __contains__(self, method: object) -> bool:
        return method in self._methods

    def __dir__(self):
        return sorted(set(self._methods) | set(super().__dir__()))

    def __repr__(self) -> str:
        return f"LazyGroup({self._name!r}, methods={sorted(self._methods)!r})"


def materialized(group: LazyGroup) -> frozenset:
    """Names of the methods of ``group`` constructed so far.

    Parameters
    ----------
    group : LazyGroup

    Returns
    -------
    frozenset of str

    """
    return frozenset(group._cache)
