"""Custom template filters and tags for the journal app."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from django import template
from django.utils import timezone
from django.utils.formats import date_format

from journal.services.writing import count_words

register = template.Library()


@register.filter
def relative_date(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Describe how long ago ``value`` was, the way the entry lists show it.

    Usage::

        {{ note.updated_at|relative_date }}

    Anything under an hour is "Just now", then whole hours up to a day,
    "Yesterday", whole days up to a week and finally the plain date.

    Args:
        value: An aware datetime, typically ``updated_at``.
        now: Reference time; only passed explicitly by tests.

    Returns:
        A short human readable label, or an empty string for ``None``.
    """
    if value is None:
        return ''
    current = now or timezone.now()
    elapsed = current - value
    hours = int(elapsed.total_seconds() // 3600)
    days = hours // 24
    if hours < 1:
        return 'Just now'
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if days == 1:
        return 'Yesterday'
    if days < 7:
        return f'{days} days ago'
    return date_format(timezone.localtime(value) if timezone.is_aware(value) else value, 'SHORT_DATE_FORMAT')


@register.filter
def word_label(value: Any) -> str:
    """Render a stored word count as "1 word" / "12 words"."""

    text = str(value or '').strip()
    if not text.isdigit():
        return ''
    return f"{text} word{'' if text == '1' else 's'}"


@register.filter
def preview_lines(value: Optional[str], lines: int = 2) -> str:
    """Return the first ``lines`` lines of ``value`` with an ellipsis if cut."""

    if not value:
        return ''
    parts = value.split('\n')
    preview = '\n'.join(parts[:lines])
    if len(parts) > lines:
        preview += '...'
    return preview


@register.simple_tag
def entry_stats(content: Optional[str]) -> Dict[str, int]:
    """Return word and character counts for the editor footer.

    .. code-block:: django

        {% entry_stats poem.content as stats %}
        {{ stats.words }} words, {{ stats.characters }} characters
    """
    content = content or ''
    return {'words': count_words(content), 'characters': len(content)}
