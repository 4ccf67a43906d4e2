"""
Core utilities shared across the task API.

This package hosts configuration, the authenticator (password hashing and
signed tokens), the domain error taxonomy and logging setup. Services and
routers depend on these primitives instead of reading os.environ or
building responses by hand.
"""
