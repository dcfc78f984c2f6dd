"""
Client side of a live mock interview: the conversation loop and its HTTP adapter.
"""

from .conversation_loop import ConversationLoopController, LoopState

__all__ = ["ConversationLoopController", "LoopState"]
