"""Staking, session and heartbeat derives.

Derive Methods
--------------
staking.validators
    Active session validators and the configured validator count.
staking.ledger
    Staking ledger of a stash, looked up through its controller.
session.info
    Current session index and validator set.
im_online.authored_blocks
    Blocks authored this session per validator.

"""

import logging

from chainderive.builtin.common import storage
from chainderive.registry import register_derive

logger = logging.getLogger(__name__)


@register_derive(
    "staking", "validators", description="Active validators and the validator count"
)
def staking_validators(caller_id, context):
    staking = storage(context, "staking")
    session = storage(context, "session")

    def validators():
        return {
            "validators": list(session["validators"]()),
            "validator_count": staking["validatorCount"](),
        }

    return validators


@register_derive("staking", "ledger", description="Staking ledger of a stash account")
def staking_ledger(caller_id, context):
    staking = storage(context, "staking")

    def ledger(stash_id):
        controller = staking["bonded"](stash_id)
        if controller is None:
            logger.debug("[%s] stash %s is not bonded", caller_id, stash_id)
            return None
        return {
            "stash_id": stash_id,
            "controller_id": controller,
            "ledger": staking["ledger"](controller),
        }

    return ledger


@register_derive("session", "info", description="Current session index and validators")
def session_info(caller_id, context):
    session = storage(context, "session")

    def info():
        return {
            "current_index": session["currentIndex"](),
            "validators": list(session["validators"]()),
        }

    return info


@register_derive(
    "im_online", "authored_blocks", description="Blocks authored this session per validator"
)
def im_online_authored_blocks(caller_id, context):
    im_online = storage(context, "imOnline")
    session = storage(context, "session")

    def authored_blocks():
        index = session["currentIndex"]()
        return {
            validator: im_online["authoredBlocks"](index, validator)
            for validator in session["validators"]()
        }

    return authored_blocks
