# explainer/errors.py


class ExplainerError(Exception):
    """Base class for errors raised by the explainer pipeline."""


class DecodeError(ExplainerError):
    """The uploaded bytes could not be decoded into an image."""


class TransportError(ExplainerError):
    """A call to the remote classifier failed or returned a non-2xx status."""

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
