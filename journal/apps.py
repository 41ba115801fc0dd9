"""Application configuration for the journal app."""

from __future__ import annotations

from django.apps import AppConfig


class JournalConfig(AppConfig):
    """Custom AppConfig for the journal application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'journal'
    verbose_name = 'Journal'
