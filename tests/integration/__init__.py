"""Integration tests for the API working as a system.

Real FastAPI app, relay and SQLite store in a temporary directory; only
the completion provider is scripted. No API key or network is needed.
"""
