"""Failure types for the alert synchronization core.

Neither is raised to callers of the core. They are constructed at the point
of failure, logged, counted, and handed to whatever outcome channel the
caller opted into.
"""


class FeedDeliveryError(Exception):
    """The remote alert feed failed to deliver a snapshot or lost its subscription."""

    def __init__(self, message: str, *, fatal: bool = False) -> None:
        super().__init__(message)
        self.fatal = fatal


class RemoteWriteError(Exception):
    """A write to the remote alert store (or the paired retract) failed."""

    def __init__(self, alert_id: str, message: str) -> None:
        super().__init__(f"{alert_id}: {message}")
        self.alert_id = alert_id
