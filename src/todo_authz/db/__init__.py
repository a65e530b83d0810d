"""
todo_authz.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
- Execute validated `QueryPlan`s against storage.
"""

# Package marker.
