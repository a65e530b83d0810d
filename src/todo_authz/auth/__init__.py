"""
todo_authz.auth

Authentication/authorization package.

Responsibilities:
- Role model and principal types.
- Token issuing/verification and identity resolution.
- Permission decisions.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs I/O; every function is safe to call concurrently.
