"""Derive Group Registry for chainderive.

This module holds the table of builtin derive groups. A derive group maps
method names to factories; a factory takes ``(caller_id, context)`` and
returns the ready-to-call derive method for one client.

Builtin groups register themselves at import time with the
``@register_derive`` decorator. The first call to ``get_builtin_registry``
imports them and freezes the table, after which it is shared read-only by
every client in the process. Callers who need extra groups pass them as a
custom registry to the composer instead of registering them globally.

Classes
-------
DeriveMethodInfo
    Dataclass containing metadata about a registered derive method.

Functions
---------
register_derive
    Decorator to register a builtin derive method factory.
get_builtin_registry
    Get the frozen builtin registry.
validate_sections
    Check the shape of a caller-supplied custom registry.
list_derive_methods
    List all registered derive methods with their metadata.

"""

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from chainderive.core.constants import SOURCE_BUILTIN, UNSET

# Module logger
logger = logging.getLogger(__name__)

# Builtin factories, group name -> method name -> factory
_BUILTIN_SECTIONS: Dict[str, Dict[str, Callable]] = {}

# Metadata storage for registered methods, keyed by (group, method)
_DERIVE_METADATA: Dict[Tuple[str, str], "DeriveMethodInfo"] = {}

# Frozen view of _BUILTIN_SECTIONS, built once on first use
_FROZEN_REGISTRY: Any = UNSET
_FREEZE_LOCK = threading.Lock()


@dataclass(frozen=True)
class DeriveMethodInfo:
    """Metadata about a registered derive method.

    Attributes
    ----------
    group : str
        Name of the derive group, e.g. ``"society"``.
    method : str
        Name of the method within the group, e.g. ``"info"``.
    description : str
        Human-readable description of what the method returns.
    factory : callable
        Factory building the method from ``(caller_id, context)``.
    source : str
        Where this method was registered from, e.g. 'builtin'.

    """

    group: str
    method: str
    description: str
    factory: Callable
    source: str = SOURCE_BUILTIN


def _check_name(kind: str, name: Any) -> None:
    if not name or not isinstance(name, str):
        raise ValueError(f"{kind} name must be a non-empty string, got {name!r}")


def register_derive(
    group: str,
    method: str,
    description: str = "",
    source: str = SOURCE_BUILTIN,
) -> Callable:
    """Decorator to register a derive method factory.

    Parameters
    ----------
    group : str
        The derive group the method belongs to.
    method : str
        The method name. This is what users call as ``derived.<group>.<method>``.
    description : str, optional
        Human-readable description of the method.
    source : str, optional
        Where this method was registered from. Default is 'builtin'.

    Returns
    -------
    callable
        The decorator function.

    Raises
    ------
    ValueError
        If the group or method name is empty.
    TypeError
        If the decorated object is not callable.
    RuntimeError
        If the builtin registry has already been frozen.

    Examples
    --------
    >>> @register_derive("society", "head", description="Current society head")
    ... def head(caller_id, context):
    ...     read = context.query["society"]["head"]
    ...     return lambda: read()

    """
    _check_name("group", group)
    _check_name("method", method)

    def decorator(factory: Callable) -> Callable:
        if not callable(factory):
            raise TypeError(f"factory for '{group}.{method}' must be callable")
        if _FROZEN_REGISTRY is not UNSET:
            raise RuntimeError(
                f"Cannot register '{group}.{method}': the builtin registry is frozen. "
                "Pass extra groups to get_available_derives(custom=...) instead."
            )

        if method in _BUILTIN_SECTIONS.get(group, {}):
            logger.warning("Replacing builtin derive method '%s.%s'", group, method)

        _BUILTIN_SECTIONS.setdefault(group, {})[method] = factory
        _DERIVE_METADATA[(group, method)] = DeriveMethodInfo(
            group=group,
            method=method,
            description=description,
            factory=factory,
            source=source,
        )
        logger.debug("Registering derive method '%s.%s'", group, method)
        return factory

    return decorator


def get_builtin_registry() -> Mapping[str, Mapping[str, Callable]]:
    """Get the frozen builtin registry.

    Returns
    -------
    mapping
        Read-only mapping of group name -> read-only mapping of method name
        -> factory.

    Notes
    -----
    The builtin groups are imported and the table is frozen on first call.
    Every later call returns the same object.

    """
    global _FROZEN_REGISTRY
    if _FROZEN_REGISTRY is not UNSET:
        return _FROZEN_REGISTRY

    with _FREEZE_LOCK:
        if _FROZEN_REGISTRY is UNSET:
            # Import builtin groups to register them
            from chainderive import builtin  # noqa: F401

            _FROZEN_REGISTRY = MappingProxyType(
                {
                    group: MappingProxyType(dict(methods))
                    for group, methods in _BUILTIN_SECTIONS.items()
                }
            )
            logger.info(
                "Builtin derive registry frozen with %d groups", len(_FROZEN_REGISTRY)
            )
    return _FROZEN_REGISTRY


def validate_sections(
    sections: Optional[Mapping[str, Mapping[str, Callable]]],
) -> Dict[str, Dict[str, Callable]]:
    """Check the shape of a custom registry and return a plain copy.

    Parameters
    ----------
    sections : mapping or None
        Group name -> method name -> factory.

    Returns
    -------
    dict
        A copy of ``sections``; empty if ``sections`` is None.

    Raises
    ------
    ValueError
        If a group or method name is empty or not a string, or a group has
        no methods.
    TypeError
        If ``sections`` or a method table is not a mapping, or a factory is
        not callable.

    """
    if sections is None:
        return {}
    if not isinstance(sections, Mapping):
        raise TypeError(
            f"custom derives must be a mapping of group name to methods, got {type(sections).__name__}"
        )

    validated = {}
    for group, methods in sections.items():
        _check_name("group", group)
        if not isinstance(methods, Mapping):
            raise TypeError(f"methods of custom derive group '{group}' must be a mapping")
        if not methods:
            raise ValueError(f"custom derive group '{group}' must define at least one method")
        for method, factory in methods.items():
            _check_name("method", method)
            if not callable(factory):
                raise TypeError(f"factory for custom derive '{group}.{method}' must be callable")
        validated[group] = dict(methods)
    return validated


def list_derive_methods() -> Dict[Tuple[str, str], DeriveMethodInfo]:
    """List all registered builtin derive methods with their metadata.

    Returns
    -------
    dict
        Dictionary mapping ``(group, method)`` to DeriveMethodInfo objects.

    Examples
    --------
    >>> for (group, method), info in list_derive_methods().items():
    ...     print(f"{group}.{method}: {info.description}")
    society.info: Society bids, head, defender, founder and pot

    """
    get_builtin_registry()
    return _DERIVE_METADATA.copy()


def is_derive_group(group: str) -> bool:
    """Check if a name is a registered builtin derive group.

    Parameters
    ----------
    group : str
        The group name to check.

    Returns
    -------
    bool

    """
    return group in get_builtin_registry()


def get_derive_method_info(group: str, method: str) -> Optional[DeriveMethodInfo]:
    """Get metadata for a builtin derive method.

    Parameters
    ----------
    group : str
        The group name to look up.
    method : str
        The method name to look up.

    Returns
    -------
    DeriveMethodInfo or None
        Metadata for the method, or None if not found.

    """
    get_builtin_registry()
    return _DERIVE_METADATA.get((group, method))
