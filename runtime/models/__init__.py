"""
Pydantic models used by the event-log runtime HTTP API.

- api_models: HTTP request/response schemas
"""
