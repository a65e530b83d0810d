"""
todo_authz.query

List-query criteria package.

Responsibilities:
- Parse untrusted list parameters into a `QueryPlan`.
- Pagination math for response metadata.
"""

# Package marker.
