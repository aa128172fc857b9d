"""Exceptions raised by the sync pipeline."""


class PodsyncError(Exception):
    """Base class for failures that end the processing of one source."""


class FeedDocumentError(PodsyncError):
    """The feed template or a feed document could not be read or written."""


class MetadataError(PodsyncError):
    """A sidecar file is unreadable or is not a JSON object."""


class RetrievalError(PodsyncError):
    """The downloader exited unsuccessfully."""

    def __init__(self, result):
        self.result = result
        super().__init__(
            f"downloader failed ({result.status.value}, exit code {result.returncode})"
        )


class NotificationError(PodsyncError):
    """The notification could not be delivered."""
