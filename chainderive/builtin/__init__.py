"""Builtin derive groups for chainderive.

This package contains the pre-registered derive groups. They are registered
when the builtin registry is first requested through
``chainderive.registry.get_builtin_registry``.

Modules
-------
accounts
    accounts, balances and chain groups.
governance
    council, technical_committee, democracy, elections, membership,
    treasury, bounties and society groups.
staking
    staking, session and im_online groups.
parachains
    parachains, crowdloan and contracts groups.

Notes
-----
Callers can replace a builtin group wholesale by passing a custom group of
the same name to ``get_available_derives``.

"""

# Import all builtin modules to trigger registration
from chainderive.builtin import accounts, governance, parachains, staking

__all__ = ["accounts", "governance", "parachains", "staking"]
