"""Account, balance and chain-head derives.

These groups read the ``system`` and ``balances`` storage modules that every
chain carries, so they have no availability rule and are always included.

Derive Methods
--------------
accounts.info
    Account id with its nonce.
balances.account
    Free, reserved and total balance of an account.
balances.total_issuance
    Total issuance of the native token.
chain.best_number
    Number of the best block.

"""

import logging

from chainderive.builtin.common import storage
from chainderive.registry import register_derive

logger = logging.getLogger(__name__)


@register_derive("accounts", "info", description="Account id and nonce")
def account_info(caller_id, context):
    system = storage(context, "system")

    def info(account_id):
        logger.debug("[%s] accounts.info(%s)", caller_id, account_id)
        account = system["account"](account_id)
        return {"account_id": account_id, "nonce": account.get("nonce", 0)}

    return info


@register_derive(
    "balances", "account", description="Free, reserved and total balance of an account"
)
def balances_account(caller_id, context):
    system = storage(context, "system")

    def account(account_id):
        logger.debug("[%s] balances.account(%s)", caller_id, account_id)
        data = system["account"](account_id).get("data", {})
        free = data.get("free", 0)
        reserved = data.get("reserved", 0)
        return {
            "account_id": account_id,
            "free": free,
            "reserved": reserved,
            "total": free + reserved,
        }

    return account


@register_derive("balances", "total_issuance", description="Total issuance of the native token")
def balances_total_issuance(caller_id, context):
    balances = storage(context, "balances")

    def total_issuance():
        return balances["totalIssuance"]()

    return total_issuance


@register_derive("chain", "best_number", description="Number of the best block")
def chain_best_number(caller_id, context):
    system = storage(context, "system")

    def best_number():
        return system["number"]()

    return best_number
