"""
todo_authz.api.routers

HTTP routers.
"""

# Package marker.
