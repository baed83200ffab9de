"""Unit tests for individual components in isolation.

Coverage:
    - store/: SQLAlchemy chat store and file store
    - parsing/: PDF and plain-text extraction
    - provider/: Agent configuration, prompt and fragment streaming
    - relay/: Turn orchestration and the producer/consumer stream

Uses mocks for the agno classes. Leverages pytest-check for multiple
assertions per test.
"""
