"""Numbered channel bookkeeping."""

from .channel_registry import CHANNEL_ERROR, MAX_CHANNEL_ID, ChannelRegistry

__all__ = ["CHANNEL_ERROR", "MAX_CHANNEL_ID", "ChannelRegistry"]
