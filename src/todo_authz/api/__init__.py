"""
todo_authz.api

HTTP API package (FastAPI).

Responsibilities:
- App factory, dependency wiring, and routers.
- Translate core error kinds into HTTP status codes.
"""

# Package marker.
