"""Persistence for notes, poems and chat messages, scoped per user.

Every lookup takes both the entry id and the owning user's id, so an entry
that belongs to somebody else is indistinguishable from one that does not
exist.  Two backings implement the same interface:

``DjangoJournalStore``
    Reads and writes the ORM models in :mod:`journal.models`.  This is the
    production backing.

``InMemoryJournalStore``
    Keeps plain dataclass records in dictionaries owned by the instance.  It
    is used by tests and by anything that needs a throwaway journal.

The backing used by the web application is named by the
``JOURNAL_STORE_BACKEND`` setting and built by :func:`build_journal_store`.
"""

from __future__ import annotations

import contextlib
import functools
import itertools
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.module_loading import import_string

from journal.models import ChatMessage, Note, Poem

logger = logging.getLogger(__name__)

Responder = Callable[[str], str]

NOTE_FIELDS: Tuple[str, ...] = ('title', 'content')
POEM_FIELDS: Tuple[str, ...] = ('title', 'content', 'word_count')
CHAT_MESSAGE_FIELDS: Tuple[str, ...] = ('message', 'is_user')


class JournalStoreError(Exception):
    """Raised when the backing storage fails to read or write an entry."""


def _normalise_id(value: Any) -> Optional[uuid.UUID]:
    """Coerce ``value`` into a UUID, returning ``None`` when it is malformed."""

    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _pick(data: Mapping[str, Any], allowed: Tuple[str, ...]) -> Dict[str, Any]:
    return {key: data[key] for key in allowed if key in data}


def _reply_timestamp(after: datetime) -> datetime:
    """Return a creation time that sorts strictly after ``after``."""

    return max(timezone.now(), after + timedelta(microseconds=1))


class JournalStore:
    """Interface shared by every journal store backing.

    Subclasses implement the per-entity operations; :meth:`post_chat_message`
    is built on top of them and only needs :meth:`atomic` to be overridden
    when the backing supports transactions.
    """

    # Notes
    def list_notes(self, user_id: int) -> List[Any]:
        raise NotImplementedError

    def get_note(self, note_id: Any, user_id: int) -> Optional[Any]:
        raise NotImplementedError

    def create_note(self, data: Mapping[str, Any], user_id: int) -> Any:
        raise NotImplementedError

    def update_note(self, note_id: Any, user_id: int, data: Mapping[str, Any]) -> Optional[Any]:
        raise NotImplementedError

    def delete_note(self, note_id: Any, user_id: int) -> bool:
        raise NotImplementedError

    # Poems
    def list_poems(self, user_id: int) -> List[Any]:
        raise NotImplementedError

    def get_poem(self, poem_id: Any, user_id: int) -> Optional[Any]:
        raise NotImplementedError

    def create_poem(self, data: Mapping[str, Any], user_id: int) -> Any:
        raise NotImplementedError

    def update_poem(self, poem_id: Any, user_id: int, data: Mapping[str, Any]) -> Optional[Any]:
        raise NotImplementedError

    def delete_poem(self, poem_id: Any, user_id: int) -> bool:
        raise NotImplementedError

    # Chat
    def list_chat_messages(self, user_id: int) -> List[Any]:
        raise NotImplementedError

    def create_chat_message(
        self,
        data: Mapping[str, Any],
        user_id: int,
        created_at: Optional[datetime] = None,
    ) -> Any:
        raise NotImplementedError

    def clear_chat_history(self, user_id: int) -> int:
        raise NotImplementedError

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        yield

    def post_chat_message(
        self,
        data: Mapping[str, Any],
        user_id: int,
        responder: Responder,
    ) -> Tuple[Any, Optional[Any]]:
        """Store a chat message and, for user-authored ones, the bot's reply.

        Returns a ``(user_message, bot_message)`` pair where ``bot_message``
        is ``None`` when the posted message was not written by the user.
        """
        with self.atomic():
            message = self.create_chat_message(data, user_id)
            if not message.is_user:
                return message, None
            reply_text = responder(message.message)
            reply = self.create_chat_message(
                {'message': reply_text, 'is_user': False},
                user_id,
                created_at=_reply_timestamp(message.created_at),
            )
        return message, reply


# ---------------------------------------------------------------------------
# Django ORM backing
# ---------------------------------------------------------------------------


def _wrap_database_errors(func):
    """Re-raise ORM ``DatabaseError`` failures as ``JournalStoreError``."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            raise JournalStoreError(f'{func.__name__} failed: {exc}') from exc

    return wrapper


class DjangoJournalStore(JournalStore):
    """Journal store backed by the relational database through the ORM."""

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        with transaction.atomic():
            yield

    def _owned(self, model, entry_id: Any, user_id: int):
        pk = _normalise_id(entry_id)
        if pk is None:
            return model.objects.none()
        return model.objects.filter(pk=pk, user_id=user_id)

    def _update(self, model, allowed: Tuple[str, ...], entry_id: Any, user_id: int, data: Mapping[str, Any]):
        entry = self._owned(model, entry_id, user_id).first()
        if entry is None:
            return None
        changes = _pick(data, allowed)
        for name, value in changes.items():
            setattr(entry, name, value)
        entry.updated_at = timezone.now()
        entry.save(update_fields=[*changes.keys(), 'updated_at'])
        logger.debug('Updated %s %s for user %s', model.__name__, entry.pk, user_id)
        return entry

    def _delete(self, model, entry_id: Any, user_id: int) -> bool:
        deleted, _ = self._owned(model, entry_id, user_id).delete()
        if deleted:
            logger.debug('Deleted %s %s for user %s', model.__name__, entry_id, user_id)
        return deleted > 0

    @_wrap_database_errors
    def list_notes(self, user_id: int) -> List[Note]:
        return list(Note.objects.filter(user_id=user_id).order_by('-updated_at', '-created_at'))

    @_wrap_database_errors
    def get_note(self, note_id: Any, user_id: int) -> Optional[Note]:
        return self._owned(Note, note_id, user_id).first()

    @_wrap_database_errors
    def create_note(self, data: Mapping[str, Any], user_id: int) -> Note:
        now = timezone.now()
        note = Note.objects.create(user_id=user_id, created_at=now, updated_at=now, **_pick(data, NOTE_FIELDS))
        logger.debug('Created note %s for user %s', note.pk, user_id)
        return note

    @_wrap_database_errors
    def update_note(self, note_id: Any, user_id: int, data: Mapping[str, Any]) -> Optional[Note]:
        return self._update(Note, NOTE_FIELDS, note_id, user_id, data)

    @_wrap_database_errors
    def delete_note(self, note_id: Any, user_id: int) -> bool:
        return self._delete(Note, note_id, user_id)

    @_wrap_database_errors
    def list_poems(self, user_id: int) -> List[Poem]:
        return list(Poem.objects.filter(user_id=user_id).order_by('-updated_at', '-created_at'))

    @_wrap_database_errors
    def get_poem(self, poem_id: Any, user_id: int) -> Optional[Poem]:
        return self._owned(Poem, poem_id, user_id).first()

    @_wrap_database_errors
    def create_poem(self, data: Mapping[str, Any], user_id: int) -> Poem:
        now = timezone.now()
        poem = Poem.objects.create(user_id=user_id, created_at=now, updated_at=now, **_pick(data, POEM_FIELDS))
        logger.debug('Created poem %s for user %s', poem.pk, user_id)
        return poem

    @_wrap_database_errors
    def update_poem(self, poem_id: Any, user_id: int, data: Mapping[str, Any]) -> Optional[Poem]:
        return self._update(Poem, POEM_FIELDS, poem_id, user_id, data)

    @_wrap_database_errors
    def delete_poem(self, poem_id: Any, user_id: int) -> bool:
        return self._delete(Poem, poem_id, user_id)

    @_wrap_database_errors
    def list_chat_messages(self, user_id: int) -> List[ChatMessage]:
        return list(ChatMessage.objects.filter(user_id=user_id).order_by('created_at'))

    @_wrap_database_errors
    def create_chat_message(
        self,
        data: Mapping[str, Any],
        user_id: int,
        created_at: Optional[datetime] = None,
    ) -> ChatMessage:
        return ChatMessage.objects.create(
            user_id=user_id,
            created_at=created_at or timezone.now(),
            **_pick(data, CHAT_MESSAGE_FIELDS),
        )

    @_wrap_database_errors
    def clear_chat_history(self, user_id: int) -> int:
        deleted, _ = ChatMessage.objects.filter(user_id=user_id).delete()
        logger.info('Cleared %s chat messages for user %s', deleted, user_id)
        return deleted


# ---------------------------------------------------------------------------
# In-memory backing
# ---------------------------------------------------------------------------


@dataclass
class NoteRecord:
    id: uuid.UUID
    user_id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    sequence: int = field(default=0, repr=False, compare=False)


@dataclass
class PoemRecord:
    id: uuid.UUID
    user_id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    word_count: str = ''
    sequence: int = field(default=0, repr=False, compare=False)


@dataclass
class ChatMessageRecord:
    id: uuid.UUID
    user_id: int
    message: str
    is_user: bool
    created_at: datetime
    sequence: int = field(default=0, repr=False, compare=False)


class InMemoryJournalStore(JournalStore):
    """Journal store that keeps everything in dictionaries on the instance.

    Records handed out are copies, so callers cannot change stored state
    without going through the store.  ``sequence`` breaks ties between
    entries written within the same clock tick.
    """

    def __init__(self) -> None:
        self._notes: Dict[uuid.UUID, NoteRecord] = {}
        self._poems: Dict[uuid.UUID, PoemRecord] = {}
        self._messages: Dict[uuid.UUID, ChatMessageRecord] = {}
        self._counter = itertools.count(1)

    def _owned(self, table: Dict[uuid.UUID, Any], entry_id: Any, user_id: int):
        pk = _normalise_id(entry_id)
        record = table.get(pk) if pk is not None else None
        if record is None or record.user_id != user_id:
            return None
        return record

    def _newest_first(self, table: Dict[uuid.UUID, Any], user_id: int) -> List[Any]:
        rows = [record for record in table.values() if record.user_id == user_id]
        rows.sort(key=lambda record: (record.updated_at, record.sequence), reverse=True)
        return [replace(record) for record in rows]

    def _update(self, table, allowed: Tuple[str, ...], entry_id: Any, user_id: int, data: Mapping[str, Any]):
        record = self._owned(table, entry_id, user_id)
        if record is None:
            return None
        for name, value in _pick(data, allowed).items():
            setattr(record, name, value)
        record.updated_at = timezone.now()
        record.sequence = next(self._counter)
        return replace(record)

    def _delete(self, table, entry_id: Any, user_id: int) -> bool:
        record = self._owned(table, entry_id, user_id)
        if record is None:
            return False
        del table[record.id]
        return True

    def list_notes(self, user_id: int) -> List[NoteRecord]:
        return self._newest_first(self._notes, user_id)

    def get_note(self, note_id: Any, user_id: int) -> Optional[NoteRecord]:
        record = self._owned(self._notes, note_id, user_id)
        return replace(record) if record else None

    def create_note(self, data: Mapping[str, Any], user_id: int) -> NoteRecord:
        now = timezone.now()
        values = _pick(data, NOTE_FIELDS)
        record = NoteRecord(
            id=uuid.uuid4(),
            user_id=user_id,
            title=values.get('title', ''),
            content=values.get('content', ''),
            created_at=now,
            updated_at=now,
            sequence=next(self._counter),
        )
        self._notes[record.id] = record
        return replace(record)

    def update_note(self, note_id: Any, user_id: int, data: Mapping[str, Any]) -> Optional[NoteRecord]:
        return self._update(self._notes, NOTE_FIELDS, note_id, user_id, data)

    def delete_note(self, note_id: Any, user_id: int) -> bool:
        return self._delete(self._notes, note_id, user_id)

    def list_poems(self, user_id: int) -> List[PoemRecord]:
        return self._newest_first(self._poems, user_id)

    def get_poem(self, poem_id: Any, user_id: int) -> Optional[PoemRecord]:
        record = self._owned(self._poems, poem_id, user_id)
        return replace(record) if record else None

    def create_poem(self, data: Mapping[str, Any], user_id: int) -> PoemRecord:
        now = timezone.now()
        values = _pick(data, POEM_FIELDS)
        record = PoemRecord(
            id=uuid.uuid4(),
            user_id=user_id,
            title=values.get('title', ''),
            content=values.get('content', ''),
            word_count=values.get('word_count') or '',
            created_at=now,
            updated_at=now,
            sequence=next(self._counter),
        )
        self._poems[record.id] = record
        return replace(record)

    def update_poem(self, poem_id: Any, user_id: int, data: Mapping[str, Any]) -> Optional[PoemRecord]:
        return self._update(self._poems, POEM_FIELDS, poem_id, user_id, data)

    def delete_poem(self, poem_id: Any, user_id: int) -> bool:
        return self._delete(self._poems, poem_id, user_id)

    def list_chat_messages(self, user_id: int) -> List[ChatMessageRecord]:
        rows = [record for record in self._messages.values() if record.user_id == user_id]
        rows.sort(key=lambda record: (record.created_at, record.sequence))
        return [replace(record) for record in rows]

    def create_chat_message(
        self,
        data: Mapping[str, Any],
        user_id: int,
        created_at: Optional[datetime] = None,
    ) -> ChatMessageRecord:
        values = _pick(data, CHAT_MESSAGE_FIELDS)
        record = ChatMessageRecord(
            id=uuid.uuid4(),
            user_id=user_id,
            message=values.get('message', ''),
            is_user=bool(values.get('is_user', True)),
            created_at=created_at or timezone.now(),
            sequence=next(self._counter),
        )
        self._messages[record.id] = record
        return replace(record)

    def clear_chat_history(self, user_id: int) -> int:
        doomed = [pk for pk, record in self._messages.items() if record.user_id == user_id]
        for pk in doomed:
            del self._messages[pk]
        return len(doomed)


def build_journal_store(backend: Optional[str] = None) -> JournalStore:
    """Instantiate the store class named by ``backend`` or the settings."""

    path = backend or getattr(
        settings,
        'JOURNAL_STORE_BACKEND',
        'journal.services.journal_store.DjangoJournalStore',
    )
    store_class = import_string(path)
    store = store_class()
    if not isinstance(store, JournalStore):
        raise TypeError(f'{path} is not a JournalStore implementation.')
    return store
