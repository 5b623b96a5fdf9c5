"""
Cross-cutting pieces: configuration, logging, errors, middleware and
the SQLite helpers used by the relational backend.
"""
