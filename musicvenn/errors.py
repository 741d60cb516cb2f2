"""Exception types shared across the musicvenn package."""

from typing import Optional


class MusicVennError(Exception):
    """Base class for all musicvenn errors."""


class ConfigError(MusicVennError):
    """Invalid setting (bad count, unknown kind, ...)."""


class ProviderError(MusicVennError):
    """A ranking or auth provider call did not succeed."""

    def __init__(self, status: str, message: Optional[str] = None):
        self.status = status
        super().__init__(message or f"Provider request failed: {status}")


class ReauthenticationRequired(MusicVennError):
    """No valid or refreshable credential; the user must visit `authorize_url`."""

    def __init__(self, authorize_url: str, verifier: str):
        self.authorize_url = authorize_url
        self.verifier = verifier
        super().__init__("User needs to reauthenticate.")


class RenderSurfaceMissing(MusicVennError):
    """The chart has no axes to draw on."""
