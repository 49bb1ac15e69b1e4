"""Composition of the derive object handed to API clients.

``get_available_derives`` is the entry point used once per client instance.
It filters the builtin groups through the availability rules, wraps each
surviving group in a ``LazyGroup`` and merges in any caller-supplied custom
groups, which replace builtin groups of the same name.

Classes
-------
DerivedObject : Read-only namespace of derive groups.

Functions
---------
inject_functions : Build lazy groups for the available groups of one registry.
compose_derives : Merge builtin and custom groups into a DerivedObject.
get_available_derives : Compose the builtin registry with custom groups.
availability_report : Tabulate group availability for a chain.

"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping as MappingType, Optional

import pandas as pd

from chainderive.availability import (
    AVAILABILITY_RULES,
    AvailabilityRule,
    is_included,
    validate_rules,
)
from chainderive.lazy import LazyGroup
from chainderive.registry import get_builtin_registry, validate_sections
from chainderive.util.utils import missing_name_message

# Module logger
logger = logging.getLogger(__name__)

Sections = MappingType[str, MappingType[str, Callable]]


class DerivedObject:
    """Namespace of the derive groups available to one client.

    Groups are reachable as attributes (``derived.society``) or items
    (``derived["society"]``); each group is a ``LazyGroup``, so
    ``derived.society.info`` builds the method on first access. The class
    only defines dunders and ``_``-prefixed attributes, so a group named
    ``items`` or ``keys`` is still reachable as an attribute.

    Parameters
    ----------
    groups : mapping
        Group name -> LazyGroup.

    """

    def __init__(self, groups: MappingType[str, LazyGroup]):
        self._groups = MappingProxyType(dict(groups))

    def __getitem__(self, group: str) -> LazyGroup:
        try:
            return self._groups[group]
        except KeyError:
            raise KeyError(
                missing_name_message("derive group", group, "DerivedObject", self._groups)
            ) from None

    def __getattr__(self, group: str) -> LazyGroup:
        if group.startswith("_"):
            raise AttributeError(group)
        if group not in self._groups:
            raise AttributeError(
                missing_name_message("derive group", group, "DerivedObject", self._groups)
            )
        return self._groups[group]

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, group: object) -> bool:
        return group in self._groups

    def __dir__(self):
        return sorted(set(self._groups) | set(super().__dir__()))

    def __repr__(self) -> str:
        return f"DerivedObject(groups={sorted(self._groups)!r})"


def inject_functions(
    caller_id: Any,
    context,
    sections: Sections,
    rules: MappingType[str, AvailabilityRule] = AVAILABILITY_RULES,
) -> Dict[str, LazyGroup]:
    """Build lazy groups for every available group of a registry.

    Parameters
    ----------
    caller_id : object
        Identity of the owning client, passed through to every factory.
    context : ChainContext
        The connected chain.
    sections : mapping
        Group name -> method name -> factory.
    rules : mapping, optional
        Availability rules keyed by group name.

    Returns
    -------
    dict
        Group name -> LazyGroup, for the groups that have at least one method
        and pass ``is_included``. No factory is invoked.

    """
    derives = {}
    for group, methods in sections.items():
        if not methods:
            logger.debug("Skipping derive group '%s' without methods", group)
            continue
        if is_included(group, context, rules):
            derives[group] = LazyGroup(group, methods, caller_id, context)
    return derives


def compose_derives(
    builtin: Sections,
    custom: Optional[Sections],
    caller_id: Any,
    context,
    rules: MappingType[str, AvailabilityRule] = AVAILABILITY_RULES,
) -> DerivedObject:
    """Merge builtin and custom derive groups into one DerivedObject.

    Parameters
    ----------
    builtin : mapping
        Builtin registry, group name -> method name -> factory.
    custom : mapping or None
        Custom registry of the same shape. Custom groups go through the same
        availability rules and replace builtin groups of the same name
        entirely; methods are not merged across the two.
    caller_id : object
        Identity of the owning client.
    context : ChainContext
        The connected chain.
    rules : mapping, optional
        Availability rules keyed by group name.

    Returns
    -------
    DerivedObject

    """
    derives = inject_functions(caller_id, context, builtin, rules)
    custom_derives = inject_functions(caller_id, context, custom or {}, rules)
    overridden = sorted(set(derives) & set(custom_derives))
    if overridden:
        logger.info("Custom derive groups override builtin groups: %s", overridden)
    derives.update(custom_derives)

    logger.debug(
        "Composed %d derive groups for caller '%s' on runtime '%s'",
        len(derives),
        caller_id,
        getattr(context, "runtime_name", ""),
    )
    return DerivedObject(derives)


def get_available_derives(
    caller_id: Any,
    context,
    custom: Optional[Sections] = None,
    rules: Optional[MappingType[str, AvailabilityRule]] = None,
) -> DerivedObject:
    """Build the derive object for one API client.

    Parameters
    ----------
    caller_id : object
        Identity of the API client. Factories use it to namespace their
        internal caches.
    context : ChainContext
        The connected chain.
    custom : mapping, optional
        Extra derive groups, group name -> method name -> factory.
    rules : mapping, optional
        Availability rules to use instead of ``AVAILABILITY_RULES``.

    Returns
    -------
    DerivedObject

    Raises
    ------
    ValueError, TypeError
        If ``custom`` is malformed (see ``validate_sections``) or ``rules``
        is malformed (see ``validate_rules``).

    Examples
    --------
    >>> derived = get_available_derives("api-1", ctx)
    >>> "society" in derived
    True
    >>> derived.society.info()
    {...}

    """
    return compose_derives(
        get_builtin_registry(),
        validate_sections(custom),
        caller_id,
        context,
        AVAILABILITY_RULES if rules is None else validate_rules(rules),
    )


def availability_report(
    context,
    sections: Optional[Sections] = None,
    rules: Optional[MappingType[str, AvailabilityRule]] = None,
) -> pd.DataFrame:
    """Tabulate which derive groups a chain can serve.

    Parameters
    ----------
    context : ChainContext
        The connected chain.
    sections : mapping, optional
        Registry to report on. Defaults to the builtin registry.
    rules : mapping, optional
        Availability rules. Defaults to ``AVAILABILITY_RULES``.

    Returns
    -------
    pd.DataFrame
        One row per group, sorted by group name, with columns ``group``,
        ``methods``, ``required_keys``, ``instance_detection`` and
        ``included``. Groups without a rule have no required keys.

    """
    sections = get_builtin_registry() if sections is None else sections
    rules = AVAILABILITY_RULES if rules is None else rules

    rows = []
    for group in sorted(sections):
        rule = rules.get(group)
        rows.append(
            {
                "group": group,
                "methods": sorted(sections[group]),
                "required_keys": list(rule.required_keys) if rule else [],
                "instance_detection": bool(rule and rule.use_instance_detection),
                "included": is_included(group, context, rules),
            }
        )
    return pd.DataFrame(
        rows,
        columns=["group", "methods", "required_keys", "instance_detection", "included"],
    )
