"""Failure kinds raised by project synchronization."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for project synchronization failures."""


class ProviderError(SyncError):
    """The local data provider could not deliver a usable inventory."""

    kind = "provider_error"


class ProviderUnavailable(ProviderError):
    """Transport or process failure while reaching the local provider."""

    kind = "provider_unavailable"


class MalformedResponse(ProviderError):
    """The provider answered, but the data failed validation."""

    kind = "malformed_response"


class CloudFetchError(SyncError):
    """Fetching cloud project metadata failed; the previous records are kept."""


class MalformedCloudData(CloudFetchError):
    """Cloud records failed validation (bad fields or duplicate ids)."""
