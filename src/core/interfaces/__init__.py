"""Core contracts.

Protocols implemented by concrete adapters, so the core depends on
abstractions instead of HTTP details.
"""
