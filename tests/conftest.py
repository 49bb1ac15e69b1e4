"""Shared chain contexts and registries between multiple unit tests."""

from unittest.mock import MagicMock

import pytest

from chainderive.core.chain_context import StaticChainContext


def make_mock_context(query_keys=(), instances=None, runtime_name="testnet"):
    """Create a duck-typed chain context whose resolver is a MagicMock.

    Parameters
    ----------
    query_keys : iterable of str
        Storage modules exposed by the chain.
    instances : dict, optional
        Logical module name -> instance names returned by the resolver.
    runtime_name : str
        Name of the active runtime.

    """
    instances = instances or {}
    context = MagicMock()
    context.query_keys = frozenset(query_keys)
    context.runtime_name = runtime_name
    context.resolve_instances.side_effect = lambda runtime, name: tuple(
        instances.get(name, ())
    )
    return context


@pytest.fixture
def mock_context_factory():
    """Factory fixture building mock chain contexts."""
    return make_mock_context


@pytest.fixture
def chain_query():
    """Storage readers of a Kusama-like chain.

    The council lives under the instance name ``generalCouncil`` and the
    parachain list under ``registrar``, so both need resolution.
    """
    accounts = {
        "alice": {"nonce": 3, "data": {"free": 100, "reserved": 20}},
        "bob": {"nonce": 0, "data": {"free": 5, "reserved": 0}},
    }
    return {
        "system": {
            "account": lambda account_id: accounts.get(account_id, {}),
            "number": lambda: 1234,
        },
        "balances": {"totalIssuance": lambda: 10_000},
        "society": {
            "bids": lambda: ["bid-carol"],
            "defender": lambda: "dave",
            "head": lambda: "alice",
            "founder": lambda: "bob",
            "maxMembers": lambda: 150,
            "pot": lambda: 500,
            "members": lambda: ["alice", "bob", "eve"],
            "suspendedMembers": lambda: ["eve"],
            "candidates": lambda: ["carol"],
        },
        "staking": {
            "validatorCount": lambda: 2,
            "bonded": lambda stash: {"alice_stash": "alice"}.get(stash),
            "ledger": lambda controller: {"active": 42, "controller": controller},
        },
        "session": {
            "currentIndex": lambda: 7,
            "validators": lambda: ["alice", "bob"],
        },
        "imOnline": {
            "authoredBlocks": lambda index, validator: {"alice": 3, "bob": 1}[validator],
        },
        "democracy": {
            "lowestUnbaked": lambda: 2,
            "referendumCount": lambda: 5,
            "referendumInfoOf": lambda index: None if index == 3 else {"ongoing": index},
        },
        "treasury": {
            "proposalCount": lambda: 3,
            "approvals": lambda: [1],
            "proposals": lambda index: None if index == 2 else {"value": index * 10},
        },
        "bounties": {
            "bountyCount": lambda: 2,
            "bounties": lambda index: {"value": 99} if index == 0 else None,
            "bountyDescriptions": lambda index: "fix the docs",
        },
        "membership": {"members": lambda: ["alice"]},
        "generalCouncil": {
            "members": lambda: ["alice", "bob"],
            "proposals": lambda: ["0x01"],
            "proposalOf": lambda h: {"call": "remark", "hash": h},
            "voting": lambda h: {"ayes": ["alice"], "nays": []},
        },
        "technicalCommittee": {
            "members": lambda: ["bob"],
            "proposals": lambda: [],
            "proposalOf": lambda h: None,
            "voting": lambda h: None,
        },
        "phragmenElection": {
            "members": lambda: ["alice"],
            "runnersUp": lambda: ["bob"],
            "candidates": lambda: ["carol"],
        },
        "registrar": {"parachains": lambda: [1000, 2000]},
        "crowdloan": {"funds": lambda para_id: {"para_id": para_id, "raised": 77}},
    }


@pytest.fixture
def chain_context(chain_query):
    """StaticChainContext over ``chain_query`` with council instance metadata."""
    return StaticChainContext(
        chain_query,
        runtime_name="kusama",
        module_instances={"kusama": {"council": ["generalCouncil"]}},
    )
