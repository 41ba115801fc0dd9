"""Middleware that hands every request the configured journal store."""

from __future__ import annotations

import logging

from journal.services.journal_store import build_journal_store

logger = logging.getLogger(__name__)


class JournalStoreMiddleware:
    """Attach a journal store to each request as ``request.journal_store``.

    The store is built once when Django loads the middleware chain, so one
    store instance is shared by all requests served by that handler.  Tests
    that swap ``JOURNAL_STORE_BACKEND`` get a fresh store with each new test
    client.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.store = build_journal_store()
        logger.debug('Journal store backend: %s', type(self.store).__name__)

    def __call__(self, request):
        request.journal_store = self.store
        return self.get_response(request)
