"""Parachain, crowdloan and contract derives.

Derive Methods
--------------
parachains.overview
    Registered parachain ids with their heads.
crowdloan.funds
    Crowdloan fund of a parachain.
contracts.info
    Contract info of an address.

"""

import logging

from chainderive.builtin.common import resolved_storage, storage
from chainderive.core.constants import PARACHAINS_MODULES
from chainderive.registry import register_derive

logger = logging.getLogger(__name__)


@register_derive("parachains", "overview", description="Registered parachains and their heads")
def parachains_overview(caller_id, context):
    # older runtimes keep the parachain list in "registrar"
    parachains = resolved_storage(context, PARACHAINS_MODULES)

    def overview():
        ids = list(parachains["parachains"]())
        heads = parachains["heads"] if "heads" in parachains else None
        return [
            {"para_id": para_id, "head": heads(para_id) if heads else None}
            for para_id in ids
        ]

    return overview


@register_derive("crowdloan", "funds", description="Crowdloan fund of a parachain")
def crowdloan_funds(caller_id, context):
    crowdloan = storage(context, "crowdloan")

    def funds(para_id):
        logger.debug("[%s] crowdloan.funds(%s)", caller_id, para_id)
        return crowdloan["funds"](para_id)

    return funds


@register_derive("contracts", "info", description="Contract info of an address")
def contracts_info(caller_id, context):
    contracts = storage(context, "contracts")

    def info(address):
        return contracts["contractInfoOf"](address)

    return info
