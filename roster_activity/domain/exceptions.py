"""Errors raised by the notification and audit subsystem."""


class TransientStoreError(RuntimeError):
    """A read or write against one of the stores failed.

    Callers surface it and let the user retry (refresh); it is never retried
    automatically.
    """


class OperationInProgressError(RuntimeError):
    """A logical operation is already running for the same owner."""


class InvalidPreferenceError(ValueError):
    """A preference patch referenced an unknown flag or a non boolean value."""


__all__ = [
    "InvalidPreferenceError",
    "OperationInProgressError",
    "TransientStoreError",
]
