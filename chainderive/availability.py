"""Availability detection for derive groups.

Not every derive group makes sense on every chain: a chain without a
``society`` storage module cannot serve ``derived.society.info``. This module
holds the table of availability rules and decides, per group, whether a
connected chain can serve it.

Detection runs in two passes. The first checks the rule's required keys
directly against the chain's exposed storage modules. The second, only for
rules that ask for it, resolves each key through the runtime's module-instance
map first, since some modules are renamed or instanced per runtime.

Classes
-------
AvailabilityRule
    Frozen rule describing which storage modules make a group usable.

Functions
---------
is_included
    Decide whether a group is available on a chain.
resolve_module
    Find the storage module backing a logical name on a chain.
validate_rules
    Check a caller-supplied availability rule table.

"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from chainderive.core.constants import (
    COUNCIL_MODULES,
    ELECTIONS_MODULES,
    PARACHAINS_MODULES,
    TECHNICAL_COMMITTEE_MODULES,
)

# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityRule:
    """Which storage modules make a derive group usable.

    Attributes
    ----------
    required_keys : tuple of str
        Storage-module names; the group is usable if any of them is present.
    use_instance_detection : bool
        Whether to also resolve each key through the runtime's
        module-instance map before declaring the group unavailable.

    Raises
    ------
    TypeError
        If any required key is not a string.
    ValueError
        If ``required_keys`` is empty while ``use_instance_detection`` is set.

    Notes
    -----
    A rule with no required keys and no instance detection never matches,
    so the group it guards is never included.

    """

    required_keys: Tuple[str, ...]
    use_instance_detection: bool = False

    def __post_init__(self):
        if isinstance(self.required_keys, str):
            raise TypeError(
                f"required_keys must be a sequence of strings, not the string '{self.required_keys}'"
            )
        keys = tuple(self.required_keys)
        for key in keys:
            if not isinstance(key, str):
                raise TypeError(f"required_keys must only contain strings, got {key!r}")
        if not keys and self.use_instance_detection:
            raise ValueError(
                "use_instance_detection requires at least one required key"
            )
        # frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, "required_keys", keys)
        object.__setattr__(self, "use_instance_detection", bool(self.use_instance_detection))


# Enable a derive group only if some of these modules are available.
# Groups missing from this table are always included.
AVAILABILITY_RULES: Mapping[str, AvailabilityRule] = MappingProxyType(
    {
        "contracts": AvailabilityRule(["contracts"]),
        "council": AvailabilityRule(COUNCIL_MODULES, use_instance_detection=True),
        "crowdloan": AvailabilityRule(["crowdloan"]),
        "democracy": AvailabilityRule(["democracy"]),
        "elections": AvailabilityRule(ELECTIONS_MODULES, use_instance_detection=True),
        "im_online": AvailabilityRule(["imOnline"]),
        "membership": AvailabilityRule(["membership"]),
        "parachains": AvailabilityRule(PARACHAINS_MODULES),
        "session": AvailabilityRule(["session"]),
        "society": AvailabilityRule(["society"]),
        "staking": AvailabilityRule(["staking"]),
        "technical_committee": AvailabilityRule(
            TECHNICAL_COMMITTEE_MODULES, use_instance_detection=True
        ),
        "treasury": AvailabilityRule(["treasury"]),
    }
)


def _resolved_instances(context, key: str) -> Tuple[str, ...]:
    """Instances registered for ``key`` on the context's runtime, never raising."""
    try:
        instances = context.resolve_instances(context.runtime_name, key)
    except Exception as err:
        # an unresolvable lookup is a non-match for this key only
        logger.debug(
            "Could not resolve module instances of '%s' on runtime '%s': %r",
            key,
            getattr(context, "runtime_name", ""),
            err,
        )
        return ()
    return tuple(instances or ())


def _first_direct_match(keys: Iterable[str], query_keys) -> Optional[str]:
    for key in keys:
        if key in query_keys:
            return key
    return None


def _first_instance_match(context, keys: Iterable[str], query_keys) -> Optional[str]:
    for key in keys:
        match = _first_direct_match(_resolved_instances(context, key), query_keys)
        if match is not None:
            return match
    return None


def is_included(
    group_name: str,
    context,
    rules: Mapping[str, AvailabilityRule] = AVAILABILITY_RULES,
) -> bool:
    """Decide whether a derive group is available on a chain.

    Parameters
    ----------
    group_name : str
        Name of the derive group, e.g. ``"society"``.
    context : ChainContext
        The connected chain. Only ``query_keys``, ``runtime_name`` and
        ``resolve_instances`` are used.
    rules : mapping, optional
        Availability rules keyed by group name. Defaults to
        ``AVAILABILITY_RULES``.

    Returns
    -------
    bool
        True if the group has no rule, if any required key is exposed by the
        chain, or (for rules with instance detection) if any required key
        resolves to an exposed instance.

    """
    rule = rules.get(group_name)
    if rule is None:
        return True

    query_keys = context.query_keys
    if _first_direct_match(rule.required_keys, query_keys) is not None:
        return True

    if rule.use_instance_detection:
        match = _first_instance_match(context, rule.required_keys, query_keys)
        if match is not None:
            logger.debug(
                "Derive group '%s' available through module instance '%s'",
                group_name,
                match,
            )
            return True

    logger.debug(
        "Derive group '%s' unavailable, none of %s exposed",
        group_name,
        list(rule.required_keys),
    )
    return False


def resolve_module(
    context, candidates: Iterable[str], use_instance_detection: bool = True
) -> Optional[str]:
    """Find the storage module that backs one of several logical names.

    Direct matches win over instance matches, so a chain exposing both
    ``council`` and an instance of it resolves to ``council``.

    Parameters
    ----------
    context : ChainContext
        The connected chain.
    candidates : iterable of str
        Logical module names in order of preference.
    use_instance_detection : bool, optional
        Whether to resolve candidates through the module-instance map when
        none of them is exposed directly. Default is True.

    Returns
    -------
    str or None
        Name of an exposed storage module, or None if none is found.

    """
    candidates = list(candidates)
    query_keys = context.query_keys
    match = _first_direct_match(candidates, query_keys)
    if match is None and use_instance_detection:
        match = _first_instance_match(context, candidates, query_keys)
    return match


def validate_rules(rules: Mapping[str, AvailabilityRule]) -> Mapping[str, AvailabilityRule]:
    """Check a caller-supplied availability rule table.

    Parameters
    ----------
    rules : mapping
        Group name -> AvailabilityRule.

    Returns
    -------
    mapping
        Read-only copy of ``rules``.

    Raises
    ------
    TypeError
        If ``rules`` is not a mapping or a value is not an AvailabilityRule.
    ValueError
        If a group name is empty or not a string.

    """
    if not isinstance(rules, Mapping):
        raise TypeError(
            f"availability rules must be a mapping of group name to AvailabilityRule, got {type(rules).__name__}"
        )
    for group, rule in rules.items():
        if not group or not isinstance(group, str):
            raise ValueError(f"group name must be a non-empty string, got {group!r}")
        if not isinstance(rule, AvailabilityRule):
            raise TypeError(
                f"availability rule for '{group}' must be an AvailabilityRule, got {type(rule).__name__}"
            )
    return MappingProxyType(dict(rules))
