"""Project state synchronization: cloud metadata, local files, selection."""

from .cloud_metadata import CloudMetadataStore, CloudRecords
from .current_project import CurrentProjectView, resolve_current_project
from .errors import (
    CloudFetchError,
    MalformedCloudData,
    MalformedResponse,
    ProviderError,
    ProviderUnavailable,
    SyncError,
)
from .local_files import LocalDataProvider, LocalFilesBridge, RefreshStage, parse_inventory
from .models import (
    NOT_SELECTED,
    CloudProjectRecord,
    CurrentProject,
    FileMapping,
    LocalFileRecord,
    ProjectFileMapping,
    ProjectId,
    Unavailable,
    UnavailableReason,
    WholeProject,
    project_key,
)
from .selection import SelectionStore

__all__ = [
    # Stores
    "CloudMetadataStore",
    "CloudRecords",
    "LocalFilesBridge",
    "LocalDataProvider",
    "RefreshStage",
    "SelectionStore",
    "CurrentProjectView",
    "resolve_current_project",
    "parse_inventory",
    # Models
    "ProjectId",
    "CloudProjectRecord",
    "LocalFileRecord",
    "FileMapping",
    "ProjectFileMapping",
    "WholeProject",
    "Unavailable",
    "UnavailableReason",
    "CurrentProject",
    "NOT_SELECTED",
    "project_key",
    # Errors
    "SyncError",
    "ProviderError",
    "ProviderUnavailable",
    "MalformedResponse",
    "CloudFetchError",
    "MalformedCloudData",
]
