"""JSON endpoints behind the notes, poems and comfort chat tabs.

Every endpoint requires an authenticated session; anonymous callers get a
401 JSON body instead of the login redirect used by the HTML pages.  Entries
are always read through ``request.journal_store`` with the caller's user id,
so another user's entry answers exactly like a missing one (404).

Status codes: 200/201 with a JSON body on success, 204 on delete, 400 when
the payload fails validation, 404 when an entry is absent or not owned and
500 (logged) when anything unexpected goes wrong.
"""

from __future__ import annotations

import functools
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type

from django.contrib.auth.models import User
from django.core.exceptions import RequestDataTooBig
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods

from .forms import ChatMessageForm, JournalEntryForm, NoteForm, PoemForm
from .services.responder import select_response
from .services.writing import random_poem_prompt

logger = logging.getLogger(__name__)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def serialise_note(note: Any) -> Dict[str, Any]:
    """Convert a stored note (model instance or record) into JSON-safe data."""

    return {
        'id': str(note.id),
        'userId': note.user_id,
        'title': note.title,
        'content': note.content,
        'createdAt': _iso(note.created_at),
        'updatedAt': _iso(note.updated_at),
    }


def serialise_poem(poem: Any) -> Dict[str, Any]:
    return {
        'id': str(poem.id),
        'userId': poem.user_id,
        'title': poem.title,
        'content': poem.content,
        'wordCount': poem.word_count or None,
        'createdAt': _iso(poem.created_at),
        'updatedAt': _iso(poem.updated_at),
    }


def serialise_chat_message(message: Any) -> Dict[str, Any]:
    return {
        'id': str(message.id),
        'userId': message.user_id,
        'message': message.message,
        'isUser': bool(message.is_user),
        'createdAt': _iso(message.created_at),
    }


def serialise_user(user: User) -> Dict[str, Any]:
    return {
        'id': user.pk,
        'email': user.email,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'username': user.get_username(),
    }


def _load_json_body(request: HttpRequest) -> Dict[str, Any] | None:
    """Decode a JSON object body; anything else (broken or oversized JSON) is ``None``."""

    try:
        payload = json.loads(request.body.decode('utf-8') or '{}')
    except RequestDataTooBig:
        logger.warning('Rejected oversized request body (path=%s)', request.path)
        return None
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    return payload


def _invalid(message: str, form: JournalEntryForm | None = None) -> JsonResponse:
    body: Dict[str, Any] = {'message': message}
    if form is not None:
        body['errors'] = form.errors.get_json_data()
    return JsonResponse(body, status=400)


def api_login_required(view: Callable[..., HttpResponse]) -> Callable[..., HttpResponse]:
    """Like ``login_required`` but answers anonymous callers with a 401."""

    @functools.wraps(view)
    def wrapper(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        if not request.user.is_authenticated:
            return JsonResponse({'message': 'Unauthorized'}, status=401)
        return view(request, *args, **kwargs)

    return wrapper


def api_failure_messages(messages: Mapping[str, str]):
    """Turn unexpected exceptions into a logged 500 with a per-method message."""

    def decorator(view: Callable[..., HttpResponse]) -> Callable[..., HttpResponse]:
        @functools.wraps(view)
        def wrapper(request: HttpRequest, *args, **kwargs) -> HttpResponse:
            try:
                return view(request, *args, **kwargs)
            except Exception:
                message = messages.get(request.method, 'Something went wrong')
                logger.exception('%s (user=%s, path=%s)', message, request.user.pk, request.path)
                return JsonResponse({'message': message}, status=500)

        return wrapper

    return decorator


@dataclass(frozen=True)
class EntryKind:
    """Describes one editable entry type (notes or poems) for the shared views."""

    label: str
    plural: str
    form_class: Type[JournalEntryForm]
    serialiser: Callable[[Any], Dict[str, Any]]

    def store_call(self, request: HttpRequest, action: str, *args):
        name = f'{action}_{self.plural}' if action == 'list' else f'{action}_{self.label}'
        return getattr(request.journal_store, name)(*args)


NOTES = EntryKind('note', 'notes', NoteForm, serialise_note)
POEMS = EntryKind('poem', 'poems', PoemForm, serialise_poem)


def _entry_collection(request: HttpRequest, kind: EntryKind) -> JsonResponse:
    user_id = request.user.pk
    if request.method == 'GET':
        entries = kind.store_call(request, 'list', user_id)
        return JsonResponse([kind.serialiser(entry) for entry in entries], safe=False)

    payload = _load_json_body(request)
    if payload is None:
        return _invalid(f'Invalid {kind.label} data')
    form = kind.form_class(payload)
    if not form.is_valid():
        return _invalid(f'Invalid {kind.label} data', form)
    entry = kind.store_call(request, 'create', form.entry_data, user_id)
    logger.info('User %s created %s %s', user_id, kind.label, entry.id)
    return JsonResponse(kind.serialiser(entry), status=201)


def _entry_detail(request: HttpRequest, kind: EntryKind, entry_id: uuid.UUID) -> HttpResponse:
    user_id = request.user.pk
    not_found = JsonResponse({'message': f'{kind.label.capitalize()} not found'}, status=404)

    if request.method == 'GET':
        entry = kind.store_call(request, 'get', entry_id, user_id)
        return JsonResponse(kind.serialiser(entry)) if entry is not None else not_found

    if request.method == 'DELETE':
        if not kind.store_call(request, 'delete', entry_id, user_id):
            return not_found
        logger.info('User %s deleted %s %s', user_id, kind.label, entry_id)
        return HttpResponse(status=204)

    payload = _load_json_body(request)
    if payload is None:
        return _invalid(f'Invalid {kind.label} data')
    form = kind.form_class(payload, partial=True)
    if not form.is_valid():
        return _invalid(f'Invalid {kind.label} data', form)
    entry = kind.store_call(request, 'update', entry_id, user_id, form.entry_data)
    if entry is None:
        return not_found
    return JsonResponse(kind.serialiser(entry))


@api_login_required
@require_http_methods(["GET"])
@api_failure_messages({'GET': 'Failed to fetch user'})
def auth_user(request: HttpRequest) -> JsonResponse:
    """Return the signed-in user's profile."""

    return JsonResponse(serialise_user(request.user))


@api_login_required
@require_http_methods(["GET", "POST"])
@api_failure_messages({'GET': 'Failed to fetch notes', 'POST': 'Failed to create note'})
def notes(request: HttpRequest) -> JsonResponse:
    """List the user's notes (most recently updated first) or create one."""

    return _entry_collection(request, NOTES)


@api_login_required
@require_http_methods(["GET", "PATCH", "DELETE"])
@api_failure_messages({
    'GET': 'Failed to fetch note',
    'PATCH': 'Failed to update note',
    'DELETE': 'Failed to delete note',
})
def note_detail(request: HttpRequest, note_id: uuid.UUID) -> HttpResponse:
    return _entry_detail(request, NOTES, note_id)


@api_login_required
@require_http_methods(["GET", "POST"])
@api_failure_messages({'GET': 'Failed to fetch poems', 'POST': 'Failed to create poem'})
def poems(request: HttpRequest) -> JsonResponse:
    """List the user's poems (most recently updated first) or create one."""

    return _entry_collection(request, POEMS)


@api_login_required
@require_http_methods(["GET", "PATCH", "DELETE"])
@api_failure_messages({
    'GET': 'Failed to fetch poem',
    'PATCH': 'Failed to update poem',
    'DELETE': 'Failed to delete poem',
})
def poem_detail(request: HttpRequest, poem_id: uuid.UUID) -> HttpResponse:
    return _entry_detail(request, POEMS, poem_id)


@api_login_required
@require_http_methods(["GET"])
def poem_prompt(request: HttpRequest) -> JsonResponse:
    """Return a random writing prompt for the poem editor."""

    return JsonResponse({'prompt': random_poem_prompt()})


@api_login_required
@require_http_methods(["GET", "POST", "DELETE"])
@api_failure_messages({
    'GET': 'Failed to fetch chat messages',
    'POST': 'Failed to send message',
    'DELETE': 'Failed to clear chat history',
})
def chat_messages(request: HttpRequest) -> HttpResponse:
    """List, post or clear the comfort chat conversation.

    Posting a user-authored message also stores the bot's reply and returns
    both as ``{"userMessage": ..., "botMessage": ...}``.
    """

    store = request.journal_store
    user_id = request.user.pk

    if request.method == 'GET':
        history = store.list_chat_messages(user_id)
        return JsonResponse([serialise_chat_message(message) for message in history], safe=False)

    if request.method == 'DELETE':
        store.clear_chat_history(user_id)
        return HttpResponse(status=204)

    payload = _load_json_body(request)
    if payload is None:
        return _invalid('Invalid message data')
    form = ChatMessageForm(payload)
    if not form.is_valid():
        return _invalid('Invalid message data', form)
    user_message, bot_message = store.post_chat_message(form.entry_data, user_id, select_response)
    body = {'userMessage': serialise_chat_message(user_message)}
    if bot_message is not None:
        body['botMessage'] = serialise_chat_message(bot_message)
    return JsonResponse(body, status=201)
