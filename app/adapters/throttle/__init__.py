"""Login throttling adapters.

This package provides a small abstraction layer so the service can start
with an in-memory failure counter and later move to a shared store without
changing the authentication flow.
"""
