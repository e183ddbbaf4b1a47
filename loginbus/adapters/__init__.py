"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (HTTP auth API, token
    providers, settings persistence) used by use cases.

Dependencies:
    Individual submodules depend on ``requests``, filesystem APIs, and domain
    protocol definitions.

Call context:
    Imported by ``loginbus.app.controller`` for runtime wiring and by tests
    for transport-level behavior verification.
"""
