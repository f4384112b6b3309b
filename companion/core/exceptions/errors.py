class UpstreamError(Exception):
    """A third-party API answered with a non-2xx status."""

    def __init__(self, status: int, body: str = "", url: str = ""):
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"Upstream error {status}")


class SyncError(Exception):
    """Profile sync could not proceed (no signed-in user, bad category...)."""


class OfflineError(SyncError):
    """Write attempted while disconnected; the update was queued, not lost."""

    def __init__(self, message: str = "Offline - update will sync when online"):
        super().__init__(message)


class ProfileNotFoundError(Exception):
    def __init__(self, uid: str):
        self.uid = uid
        super().__init__(f"Profile not found for user {uid}")


class InvalidProfileUpdateError(ValueError):
    """The write names an unknown field or breaks a column constraint."""
