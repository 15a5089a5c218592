"""
Persistence adapters.

These modules encapsulate how owner records are stored and retrieved.
Services depend on the ``IdentityStore`` interface rather than on SQLAlchemy.
"""
