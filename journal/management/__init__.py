"""Management package for custom Django admin commands.

Currently exposes ``clear_chat_history``; see its module docstring for usage.
"""
