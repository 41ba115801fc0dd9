"""Data models for the Talking Notes journal.

Each entry belongs to exactly one Django auth ``User`` and is removed with
it.  Primary keys are UUIDs so identifiers exposed through the JSON API are
not guessable across accounts.  Owner scoping itself lives in the journal
store, which always filters by both ``id`` and ``user``.
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone


class Note(models.Model):
    """A private free-form note."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notes')
    title = models.TextField()
    content = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-updated_at']
        indexes = [models.Index(fields=['user', '-updated_at'], name='journal_note_user_updated_idx')]

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class Poem(models.Model):
    """A poem together with the word count shown in the poem list.

    ``word_count`` is kept as text because clients historically sent it as a
    string; it is filled in from the content when the client omits it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='poems')
    title = models.TextField()
    content = models.TextField()
    word_count = models.CharField(max_length=16, blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-updated_at']
        indexes = [models.Index(fields=['user', '-updated_at'], name='journal_poem_user_updated_idx')]

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class ChatMessage(models.Model):
    """One line of the comfort chat, written either by the user or the bot."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='chat_messages')
    message = models.TextField()
    is_user = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['created_at']
        indexes = [models.Index(fields=['user', 'created_at'], name='journal_chat_user_created_idx')]

    def __str__(self) -> str:  # pragma: no cover
        author = 'user' if self.is_user else 'bot'
        return f"ChatMessage<{author} {self.created_at:%Y-%m-%d %H:%M}>"
