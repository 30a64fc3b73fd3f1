from __future__ import annotations


class SchedulerError(Exception):
    pass


class ValidationError(SchedulerError):
    """Caller input was rejected; the message is safe to show to the client."""


class NotFoundError(SchedulerError):
    pass


class StorageError(SchedulerError):
    pass
