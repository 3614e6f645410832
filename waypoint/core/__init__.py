"""Core gameplay primitives (navigation, dialogue, session state and view derivation).

Kept free of FastAPI concerns so it can be reused by API routes, scripts, and tests.
"""
