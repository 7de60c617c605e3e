"""Project data shapes shared by the cloud and local sides.

Records are frozen pydantic models: a refresh replaces them wholesale and
nothing edits them in place. Wire names used by the cloud service and the
local helper (``createdAt``, ``contentHash``, ...) are accepted on input.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import PurePath
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

ProjectId = Union[int, str]


class LocalFileRecord(BaseModel):
    """One file on local disk belonging to a project."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    path: str
    name: str
    updated_at: datetime = Field(validation_alias=AliasChoices("updated_at", "updatedAt", "updateDate"))
    content_hash: str = Field(validation_alias=AliasChoices("content_hash", "contentHash", "hash"))
    size: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("path"):
            data = {**data, "name": PurePath(str(data["path"])).name}
        return data

    @field_validator("content_hash", mode="before")
    @classmethod
    def _hash_as_text(cls, value: Any) -> Any:
        # The local helper reports xxh3 digests as integers
        if isinstance(value, int) and not isinstance(value, bool):
            return format(value, "x")
        return value


FileMapping = Mapping[str, LocalFileRecord]
ProjectFileMapping = Mapping[ProjectId, FileMapping]


class CloudProjectRecord(BaseModel):
    """Project metadata as held by the cloud service."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    id: ProjectId
    name: str
    description: Optional[str] = None
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"))
    cloud_files: Dict[str, LocalFileRecord] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("cloud_files", "cloudFiles"),
    )


CLOUD_RECORDS_ADAPTER = TypeAdapter(list[CloudProjectRecord])
PROJECT_FILE_MAPPING_ADAPTER = TypeAdapter(Dict[ProjectId, Dict[str, LocalFileRecord]])

EMPTY_PROJECT_FILE_MAPPING: ProjectFileMapping = MappingProxyType({})


def project_key(project_id: ProjectId) -> str:
    """Canonical form used to match ids across sources.

    JSON object keys from the local side are always strings while cloud ids
    are usually integers, so ``1`` and ``"1"`` name the same project.
    """
    return str(project_id)


def freeze_project_file_mapping(
    mapping: Mapping[ProjectId, Mapping[str, LocalFileRecord]],
) -> ProjectFileMapping:
    """Wrap a validated inventory in read-only views."""
    return MappingProxyType({
        project_id: MappingProxyType(dict(files))
        for project_id, files in mapping.items()
    })


class UnavailableReason(str, Enum):
    NOT_SELECTED = "not_selected"
    MISSING_CLOUD = "missing_cloud"
    MISSING_LOCAL = "missing_local"
    MISSING_BOTH = "missing_both"


@dataclass(frozen=True)
class Unavailable:
    """No current project, and why. Falsy so callers can write ``if view:``."""

    reason: UnavailableReason
    project_id: Optional[ProjectId] = None

    def __bool__(self) -> bool:
        return False

    def as_dict(self) -> Dict[str, Any]:
        return {"available": False, "reason": self.reason.value, "project_id": self.project_id}


NOT_SELECTED = Unavailable(UnavailableReason.NOT_SELECTED)


@dataclass(frozen=True)
class WholeProject:
    """Cloud metadata joined with the local files of the same project.

    Holds the stores' objects by reference; never stored or mutated.
    """

    metadata: CloudProjectRecord
    local_files: FileMapping

    @property
    def project_id(self) -> ProjectId:
        return self.metadata.id

    def as_dict(self) -> Dict[str, Any]:
        return {
            "available": True,
            "metadata": self.metadata.model_dump(mode="json"),
            "local_files": {
                path: record.model_dump(mode="json")
                for path, record in self.local_files.items()
            },
        }


CurrentProject = Union[WholeProject, Unavailable]
