"""
Runtime package for the event-log store.

This package contains:
- EventLogger (the public entry point: submit / query / setters)
- Ingestion (single-writer channel for commits)
- Context (field snapshot + host context providers)
- Sinks (system-level log forwarding)
- Store (append-only record storage)
- API layer (FastAPI server + routes) and its request/response models
"""
