"""Test package for PDF Chat.

Structure:
    - unit/: Store, parsing, provider and relay tests in isolation
    - integration/: HTTP endpoints against a temporary database

The model is never called; a scripted provider stands in for it.
Leverages pytest with pytest-check for soft assertions.
"""
