"""Structured data types for fossil timeline changelogs.

Entries are built by the timeline parser and are read-only afterwards.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterator, Optional


class EditType(str, Enum):
  """Kind of mutation a checkin applied to a file"""

  ADD = "add"
  DELETE = "delete"
  EDIT = "edit"


@dataclass(frozen=True)
class AffectedFile:
  """One file mutation within a ChangeEntry.

  Attributes:
      edit_type: ADD, DELETE or EDIT
      path: Repository-relative path, may contain spaces
      commit_id: Commit id of the owning entry, resolved through
          ChangeLogCollection.entry_for
  """

  edit_type: EditType
  path: str
  commit_id: str


@dataclass(frozen=True)
class ChangeEntry:
  """One checkin from a fossil timeline.

  Attributes:
      date: Day header the checkin appeared under (YYYY-MM-DD)
      time_of_day: HH:MM:SS from the checkin line
      commit_id: Short (10 hex chars) revision id
      message: Checkin comment with continuation lines joined by single spaces
      tags: Labels on the checkin. Never populated from timeline text.
      is_merge: Never set from timeline text.
      affected_files: Files touched by the checkin, in timeline order
  """

  date: str
  time_of_day: str
  commit_id: str
  message: str = ""
  tags: tuple[str, ...] = ()
  is_merge: bool = False
  affected_files: tuple[AffectedFile, ...] = ()

  @property
  def author(self) -> str:
    # Resolving a checkin to a user happens outside this package
    return ""

  @property
  def affected_paths(self) -> list[str]:
    return [f.path for f in self.affected_files]

  @property
  def timestamp(self) -> Optional[date]:
    """Day of the checkin, or None if the header date is not ISO formatted"""
    try:
      return date.fromisoformat(self.date)
    except ValueError:
      return None

  def to_dict(self):
    """Convert to dict for JSON serialization."""
    return {
      "date": self.date,
      "time": self.time_of_day,
      "commit_id": self.commit_id,
      "message": self.message,
      "tags": list(self.tags),
      "is_merge": self.is_merge,
      "files": [
        {"edit_type": f.edit_type.value, "path": f.path}
        for f in self.affected_files
      ],
    }


@dataclass(frozen=True)
class ChangeLogCollection:
  """Ordered changelog, newest checkin first (timeline order)."""

  entries: tuple[ChangeEntry, ...] = field(default_factory=tuple)

  kind = "fossil"

  def __iter__(self) -> Iterator[ChangeEntry]:
    return iter(self.entries)

  def __len__(self) -> int:
    return len(self.entries)

  def __getitem__(self, index: int) -> ChangeEntry:
    return self.entries[index]

  @property
  def is_empty(self) -> bool:
    return not self.entries

  def entry_for(self, affected_file: AffectedFile) -> Optional[ChangeEntry]:
    """Return the entry that owns affected_file, or None if it is not in this log"""
    for entry in self.entries:
      if entry.commit_id == affected_file.commit_id and affected_file in entry.affected_files:
        return entry
    return None

  def to_dict(self):
    return {
      "kind": self.kind,
      "entries": [entry.to_dict() for entry in self.entries],
    }


@dataclass(frozen=True)
class RevisionState:
  """The tip of a fossil repository, identified by a single checkin hash.

  Two states are equal iff their ids are equal.
  """

  rev_id: str = ""

  @property
  def display_name(self) -> str:
    return self.rev_id

  @property
  def is_empty(self) -> bool:
    return self.rev_id == ""

  def __str__(self) -> str:
    return f"RevisionState revid:{self.rev_id}"
