"""Chain context abstraction for the derive engine.

A chain context describes what a connected chain actually exposes. The
availability detector only relies on three capabilities:

- ``query_keys``: the storage-module names the chain exposes
- ``runtime_name``: the name of the active runtime/spec
- ``resolve_instances``: a lookup from a logical module name to the
  concrete storage-instance names registered for a runtime

Built-in derive methods additionally read storage through ``query``.

Classes
-------
ChainContext : Abstract base class for chain contexts.
StaticChainContext : In-memory chain context built from plain mappings.

"""

import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class ChainContext(ABC):
    """Abstract base class for the view of a connected chain.

    Notes
    -----
    The derive engine never mutates a context and only reads the attributes
    listed below, so any object providing them can be used in its place.

    Methods
    -------
    resolve_instances(runtime_name, logical_name)
        Concrete storage-instance names for a logical module.

    """

    @property
    @abstractmethod
    def query_keys(self) -> frozenset:
        """Storage-module names exposed by the connected chain."""

    @property
    @abstractmethod
    def runtime_name(self) -> str:
        """Name of the active runtime."""

    @property
    @abstractmethod
    def query(self) -> Mapping[str, Mapping[str, Callable]]:
        """Storage readers grouped by storage-module name."""

    @abstractmethod
    def resolve_instances(self, runtime_name: str, logical_name: str) -> Tuple[str, ...]:
        """Resolve a logical module name to concrete storage-instance names.

        Parameters
        ----------
        runtime_name : str
            Runtime to resolve against.
        logical_name : str
            Logical storage-module name, e.g. ``"council"``.

        Returns
        -------
        tuple of str
            Zero or more instance names. Empty if nothing is registered.

        """


class StaticChainContext(ChainContext):
    """Chain context backed by in-memory mappings.

    Parameters
    ----------
    query : mapping
        Storage readers keyed by module name, then by storage item name,
        e.g. ``{"society": {"members": lambda: [...]}}``.
    runtime_name : str
        Name of the active runtime.
    module_instances : mapping, optional
        Runtime name -> logical module name -> instance names, e.g.
        ``{"kusama": {"council": ["council", "generalCouncil"]}}``.
    query_keys : iterable of str, optional
        Override for the exposed module names. Defaults to the keys of
        ``query``.

    Examples
    --------
    >>> ctx = StaticChainContext(
    ...     {"society": {"head": lambda: "5F..."}},
    ...     runtime_name="kusama",
    ... )
    >>> sorted(ctx.query_keys)
    ['society']

    """

    def __init__(
        self,
        query: Optional[Mapping[str, Mapping[str, Callable]]] = None,
        runtime_name: str = "",
        module_instances: Optional[Mapping[str, Mapping[str, Sequence[str]]]] = None,
        query_keys: Optional[Iterable[str]] = None,
    ):
        self._query = MappingProxyType(
            {module: MappingProxyType(dict(items)) for module, items in (query or {}).items()}
        )
        self._runtime_name = runtime_name
        self._module_instances: Dict[str, Dict[str, Tuple[str, ...]]] = {
            runtime: {name: tuple(instances) for name, instances in names.items()}
            for runtime, names in (module_instances or {}).items()
        }
        self._query_keys = frozenset(
            query_keys if query_keys is not None else self._query.keys()
        )
        logger.debug(
            "StaticChainContext for runtime '%s' exposes %d modules",
            runtime_name,
            len(self._query_keys),
        )

    @property
    def query_keys(self) -> frozenset:
        return self._query_keys

    @property
    def runtime_name(self) -> str:
        return self._runtime_name

    @property
    def query(self) -> Mapping[str, Mapping[str, Callable]]:
        return self._query

    def resolve_instances(self, runtime_name: str, logical_name: str) -> Tuple[str, ...]:
        return self._module_instances.get(runtime_name, {}).get(logical_name, ())

    def __repr__(self) -> str:
        return (
            f"StaticChainContext(runtime_name={self._runtime_name!r}, "
            f"query_keys={sorted(self._query_keys)!r})"
        )
