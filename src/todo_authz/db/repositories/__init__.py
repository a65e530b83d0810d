"""
todo_authz.db.repositories

Repository layer.

Responsibilities:
- Thin per-entity wrappers over the plan executor and primary-key lookups.
"""

# Package marker.
