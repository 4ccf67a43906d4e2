"""
High-level use cases for the task API.

Each service orchestrates repositories and the authenticator to implement
the business rules (signup, login, owner-scoped task CRUD). Routers call
these services instead of touching sessions or SQL directly.
"""
