"""Models shared across the loader."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from bs4 import Tag
from pydantic import BaseModel, ConfigDict, Field, field_validator


class NameRole(str, Enum):
    PAGE = "page"
    RESOURCE = "resource"


class ResourceRole(str, Enum):
    IMAGE = "image"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    LINKED_PAGE = "linked-page"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class PageRequest(BaseModel):
    """Immutable input of one download run."""

    model_config = ConfigDict(frozen=True)

    source_url: str
    output_directory: Path

    @field_validator("output_directory")
    @classmethod
    def _absolute(cls, value: Path) -> Path:
        return value.expanduser().absolute()


@dataclass
class ResourceReference:
    """A same-origin resource found in the page markup.

    ``node`` is the element the reference was read from; the assembler writes
    ``local_path`` back into ``node[attribute]`` once the download succeeded.
    """

    original_url: str
    absolute_url: str
    role: ResourceRole
    attribute: str
    local_file_name: str
    local_path: str
    node: Tag


@dataclass
class DownloadOutcome:
    """Result of fetching one resource."""

    reference: ResourceReference
    status: OutcomeStatus
    error_detail: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


class PageResult(BaseModel):
    """Where a downloaded page and its resources were written."""

    html_path: Path
    resources_directory: Path
    failed_resources: List[str] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Return True when every resource was saved locally."""
        return not self.failed_resources
