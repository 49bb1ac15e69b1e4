"""Helpers shared by the builtin derive groups."""

import logging
from typing import Callable, Iterable, Mapping

from chainderive.availability import resolve_module
from chainderive.util.utils import missing_name_message

logger = logging.getLogger(__name__)


def storage(context, module: str) -> Mapping[str, Callable]:
    """Storage readers of one module on the connected chain.

    Raises
    ------
    KeyError
        If the chain does not expose ``module``.

    """
    try:
        return context.query[module]
    except KeyError:
        raise KeyError(
            missing_name_message("storage module", module, "Chain", context.query)
        ) from None


def resolved_storage(context, candidates: Iterable[str]) -> Mapping[str, Callable]:
    """Storage readers of the first module in ``candidates`` the chain exposes.

    Candidates are resolved directly first, then through the runtime's
    module-instance map.

    Raises
    ------
    KeyError
        If none of the candidates is exposed.

    """
    candidates = list(candidates)
    module = resolve_module(context, candidates)
    if module is None:
        raise KeyError(f"Chain exposes none of the storage modules {candidates}")
    logger.debug("Resolved %s to storage module '%s'", candidates, module)
    return storage(context, module)


def collective_members(caller_id, context, candidates: Iterable[str]) -> Callable:
    """Factory body for ``<collective>.members``."""
    query = resolved_storage(context, candidates)

    def members():
        logger.debug("[%s] reading collective members", caller_id)
        return list(query["members"]())

    return members


def collective_proposals(caller_id, context, candidates: Iterable[str]) -> Callable:
    """Factory body for ``<collective>.proposals``."""
    query = resolved_storage(context, candidates)

    def proposals():
        logger.debug("[%s] reading collective proposals", caller_id)
        return [
            {
                "hash": proposal_hash,
                "proposal": query["proposalOf"](proposal_hash),
                "votes": query["voting"](proposal_hash),
            }
            for proposal_hash in query["proposals"]()
        ]

    return proposals
