"""Core types and constants shared by the derive engine."""

from chainderive.core.chain_context import ChainContext, StaticChainContext

__all__ = ["ChainContext", "StaticChainContext"]
