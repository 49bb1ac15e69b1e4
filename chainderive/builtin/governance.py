"""Governance derives: collectives, democracy, elections, treasury and society.

The council, technical committee and elections modules have been renamed or
instanced across runtimes, so their factories locate the backing storage
module through ``resolve_module`` rather than by a fixed name.

Derive Methods
--------------
council.members, council.proposals
technical_committee.members, technical_committee.proposals
democracy.referendums
elections.info
membership.members
treasury.proposals
bounties.bounties
society.info, society.members, society.candidates

"""

import logging

from chainderive.builtin.common import (
    collective_members,
    collective_proposals,
    resolved_storage,
    storage,
)
from chainderive.core.constants import (
    COUNCIL_MODULES,
    ELECTIONS_MODULES,
    TECHNICAL_COMMITTEE_MODULES,
)
from chainderive.registry import register_derive

logger = logging.getLogger(__name__)


@register_derive("council", "members", description="Current council members")
def council_members(caller_id, context):
    return collective_members(caller_id, context, COUNCIL_MODULES)


@register_derive(
    "council", "proposals", description="Open council motions with their votes"
)
def council_proposals(caller_id, context):
    return collective_proposals(caller_id, context, COUNCIL_MODULES)


@register_derive(
    "technical_committee", "members", description="Current technical committee members"
)
def technical_committee_members(caller_id, context):
    return collective_members(caller_id, context, TECHNICAL_COMMITTEE_MODULES)


@register_derive(
    "technical_committee",
    "proposals",
    description="Open technical committee motions with their votes",
)
def technical_committee_proposals(caller_id, context):
    return collective_proposals(caller_id, context, TECHNICAL_COMMITTEE_MODULES)


@register_derive("democracy", "referendums", description="Referendums not yet baked")
def democracy_referendums(caller_id, context):
    democracy = storage(context, "democracy")

    def referendums():
        first = democracy["lowestUnbaked"]()
        count = democracy["referendumCount"]()
        logger.debug("[%s] reading referendums %s..%s", caller_id, first, count)
        result = []
        for index in range(first, count):
            info = democracy["referendumInfoOf"](index)
            if info is not None:
                result.append({"index": index, "info": info})
        return result

    return referendums


@register_derive(
    "elections", "info", description="Elected members, runners up and candidates"
)
def elections_info(caller_id, context):
    elections = resolved_storage(context, ELECTIONS_MODULES)

    def info():
        def read(item):
            # older election modules lack some items
            return list(elections[item]()) if item in elections else []

        return {
            "members": read("members"),
            "runners_up": read("runnersUp"),
            "candidates": read("candidates"),
        }

    return info


@register_derive("membership", "members", description="Current membership set")
def membership_members(caller_id, context):
    membership = storage(context, "membership")

    def members():
        return list(membership["members"]())

    return members


@register_derive(
    "treasury", "proposals", description="Treasury proposals split into approved and pending"
)
def treasury_proposals(caller_id, context):
    treasury = storage(context, "treasury")

    def proposals():
        count = treasury["proposalCount"]()
        approvals = set(treasury["approvals"]())
        approved, pending = [], []
        for index in range(count):
            proposal = treasury["proposals"](index)
            if proposal is None:
                continue
            entry = {"index": index, "proposal": proposal}
            (approved if index in approvals else pending).append(entry)
        return {"count": count, "approved": approved, "pending": pending}

    return proposals


@register_derive("bounties", "bounties", description="All bounties with their descriptions")
def bounties_bounties(caller_id, context):
    bounties = storage(context, "bounties")

    def all_bounties():
        result = []
        for index in range(bounties["bountyCount"]()):
            bounty = bounties["bounties"](index)
            if bounty is None:
                continue
            result.append(
                {
                    "index": index,
                    "bounty": bounty,
                    "description": bounties["bountyDescriptions"](index),
                }
            )
        return result

    return all_bounties


@register_derive(
    "society", "info", description="Society bids, head, defender, founder and pot"
)
def society_info(caller_id, context):
    society = storage(context, "society")

    def info():
        logger.debug("[%s] reading society info", caller_id)
        return {
            "bids": list(society["bids"]()),
            "defender": society["defender"](),
            "head": society["head"](),
            "founder": society["founder"](),
            "max_members": society["maxMembers"](),
            "pot": society["pot"](),
        }

    return info


@register_derive("society", "members", description="Society members with suspension state")
def society_members(caller_id, context):
    society = storage(context, "society")

    def members():
        suspended = set(society["suspendedMembers"]())
        return [
            {"account_id": member, "is_suspended": member in suspended}
            for member in society["members"]()
        ]

    return members


@register_derive("society", "candidates", description="Current society candidates")
def society_candidates(caller_id, context):
    society = storage(context, "society")

    def candidates():
        return list(society["candidates"]())

    return candidates
