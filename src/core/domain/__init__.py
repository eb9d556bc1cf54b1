"""Domain models.

Plain data structures (Pydantic v2). The domain knows nothing about HTTP,
the CLI or any particular third-party API.
"""
