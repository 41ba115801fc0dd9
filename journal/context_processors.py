"""Custom context processors for the journal application.

Exposes the name templates greet the signed-in user with, following the
"first name, then email, then Friend" fallback used across the UI.
"""

from __future__ import annotations

from typing import Any, Dict


def journal(request) -> Dict[str, Any]:
    """Add ``display_name`` and ``app_name`` to every template context."""
    display_name = 'Friend'
    user = getattr(request, 'user', None)
    if user and user.is_authenticated:
        display_name = user.first_name or user.email or 'Friend'
    return {
        'app_name': 'Talking Notes',
        'display_name': display_name,
    }
