"""
Custom exceptions for the event-log store.

These exceptions are intentionally simple and descriptive.
They are used across:

  - core/fields/     (field registry lookups)
  - core/query/      (filter construction)
  - core/serialization/
  - runtime/         (write channel, store, API)

Placing them at the project root (exceptions/) avoids circular imports
and keeps exception types consistent across modules.
"""


class UnknownField(Exception):
    """
    Raised when a field name is not part of the field registry.

    Surfaced to the query caller; fatal to that query only.
    """

    def __init__(self, field_name, details=None):
        self.field_name = field_name
        self.details = details or "Field is not part of the registry."
        msg = f"Unknown field: {field_name!r}. {self.details}"
        super().__init__(msg)


class UnfilterableField(UnknownField):
    """
    Raised when a registry field exists but holds a nested container
    (properties, user_info, device_info) and so cannot be used in a
    membership filter.
    """

    def __init__(self, field_name):
        super().__init__(
            field_name,
            details="Field is a container and cannot be filtered on.",
        )


class WriteError(Exception):
    """
    Raised when a record could not be committed to the store.

    The write path never retries; the caller decides whether to resubmit.
    The underlying failure is kept in `__cause__` and in `details`.
    """

    def __init__(self, event_name, details=None):
        self.event_name = event_name
        self.details = details or "Commit failed."
        msg = f"Failed to save event {event_name!r}: {self.details}"
        super().__init__(msg)


class SerializationFault(Exception):
    """
    Raised by the record encoder when a record cannot be rendered.

    Never escapes `render()`: it is replaced by a diagnostic string there.
    """

    def __init__(self, log_id, details=None):
        self.log_id = log_id
        self.details = details or "Encoding failed."
        msg = f"Could not serialize record {log_id!r}: {self.details}"
        super().__init__(msg)
