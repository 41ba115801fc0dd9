"""Service helpers for the journal app: storage, chat replies and text utilities."""
