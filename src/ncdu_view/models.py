# src/ncdu_view/models.py
"""
Pydantic models for directory listings and export metadata.

Field names are snake_case in Python and camelCase on the wire
(``isDirectory``, ``itemCount``, ``totalItems``...), which is what the
browser UI consumes.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def file_extension(name: str) -> Optional[str]:
    """Return the text after the last ``.`` in ``name``, or None if there is no dot."""
    if "." not in name:
        return None
    return name.rsplit(".", 1)[1]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict:
        """Dump to a JSON-ready dict using camelCase keys, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FileSystemEntry(_WireModel):
    """Common shape of every entry shown in a listing."""
    name: str
    size: int = Field(0, ge=0, description="Size in bytes")
    is_directory: bool


class DirectoryEntry(FileSystemEntry):
    is_directory: Literal[True] = True
    item_count: Optional[int] = Field(None, ge=0, description="Number of direct children")


class FileEntry(FileSystemEntry):
    is_directory: Literal[False] = False
    extension: Optional[str] = None

    @classmethod
    def for_name(cls, name: str, size: int) -> "FileEntry":
        return cls(name=name, size=size, extension=file_extension(name))


class DirectoryListing(_WireModel):
    """Direct contents of one directory, largest entries first.

    ``error`` is a soft signal: ``"Directory is empty"`` when the path resolved
    to an empty directory, ``"Path not found: ..."`` when it did not resolve.
    The two are told apart by whether ``path`` equals the requested path.
    """
    current: DirectoryEntry
    path: List[str]
    directories: List[DirectoryEntry] = []
    files: List[FileEntry] = []
    total_items: int = 0
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_total_items(self):
        if self.total_items != len(self.directories) + len(self.files):
            raise ValueError(
                f"total_items={self.total_items} does not match "
                f"{len(self.directories)} directories + {len(self.files)} files"
            )
        return self


class ExportSummary(_WireModel):
    """Export-wide metadata, derived once at decode time."""
    root_path: str = "/"
    total_size: int = Field(0, ge=0)
    available_space: int = Field(0, ge=0)
    total_files: int = Field(0, ge=0)
    max_files: int = Field(0, ge=0)
    scan_time: Optional[datetime] = None
