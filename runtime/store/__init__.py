"""
Storage abstractions for the event-log runtime.

Includes:
- LogStore: append-only record storage (in-memory + JSON-lines file)
"""
