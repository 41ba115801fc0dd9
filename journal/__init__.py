"""Journal application for Talking Notes.

This package contains the models, views, forms, templates and supporting
services behind the three journal surfaces: private notes, poems and the
comfort chat console. Persistence goes through the journal store (see
``journal.services.journal_store``) so the backing can be swapped between
the ORM and an in-memory implementation.
"""
