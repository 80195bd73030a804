"""Parser for `fossil timeline` output.

A timeline dump is newest-first, grouped by day:

  === 2012-05-12 ===
  14:45:43 [d4614a2a34] Fixed bug 37e77677ea added creator and updater to all
           persistent objects. (user: perrella tags: trunk)
     EDITED pom.xml
     ADDED src/main/webapp/WEB-INF/web.xml

The parser is a small state machine. Every transition is a pure function of
(state, entry under construction, line) so each one can be exercised alone.
Lines it does not recognise are dropped; it never fails on bad input.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from .changelog_types import AffectedFile, ChangeEntry, ChangeLogCollection, EditType
from .columns import column
from .exceptions import MalformedLine, ParserInternalError

logger = logging.getLogger(__name__)

# Column layout
# 0         1         2
# 012345678901234567890123
# === 2012-06-10 ===
# 20:34:57 [31eb532808] first checkin
DAY_HEADER_PREFIX = "==="
DAY_HEADER_MIN_WIDTH = 18
DATE_START = 4
DATE_END = 14
TIME_START = 0
TIME_END = 8
COMMIT_ID_START = 10
COMMIT_ID_END = 20
MESSAGE_START = 22
CONTINUATION_INDENT = " " * 8

CHECKIN_RE = re.compile(r"^\d\d:\d\d:\d\d \[[0-9a-fA-F]{10}\](?: |$)")

# Continuation lines are checked before these
FILE_PREFIXES = (
  ("   ADDED ", EditType.ADD),
  ("   DELETED ", EditType.DELETE),
  ("   EDITED ", EditType.EDIT),
)


class ParserState(Enum):
  SEEKING = "seeking"
  EXPECT_CHECKIN = "expect_checkin"
  BODY = "body"


@dataclass
class EntryContext:
  """Entry under construction"""

  date: str
  time_of_day: str = ""
  commit_id: Optional[str] = None
  message_parts: list[str] = field(default_factory=list)
  files: list[AffectedFile] = field(default_factory=list)

  def start_checkin(self, time_of_day: str, commit_id: str, message: str) -> None:
    self.time_of_day = time_of_day
    self.commit_id = commit_id
    self.message_parts = [message]

  def add_continuation(self, text: str) -> None:
    self.message_parts.append(text)

  def add_file(self, edit_type: EditType, path: str) -> None:
    # commit_id is always set once the state machine is in BODY
    self.files.append(AffectedFile(edit_type=edit_type, path=path, commit_id=self.commit_id or ""))

  def build(self) -> Optional[ChangeEntry]:
    """Freeze into a ChangeEntry, or None if no checkin line was ever seen"""
    if self.commit_id is None:
      return None
    return ChangeEntry(
      date=self.date,
      time_of_day=self.time_of_day,
      commit_id=self.commit_id,
      message=" ".join(part for part in self.message_parts if part),
      affected_files=tuple(self.files),
    )


StepResult = tuple[ParserState, Optional[EntryContext], Optional[ChangeEntry]]


def parse_day_header(line: str) -> str:
  """Return the date from a `=== YYYY-MM-DD ===` line"""
  column(line, 0, DAY_HEADER_MIN_WIDTH)
  return column(line, DATE_START, DATE_END)


def parse_checkin_line(line: str) -> Optional[tuple[str, str, str]]:
  """Return (time, commit id, message) or None if the line is not a checkin line"""
  if not CHECKIN_RE.match(line):
    return None
  time_of_day = column(line, TIME_START, TIME_END)
  commit_id = column(line, COMMIT_ID_START, COMMIT_ID_END)
  try:
    message = column(line, MESSAGE_START).strip()
  except MalformedLine:
    message = ""
  return time_of_day, commit_id, message


def parse_file_line(line: str) -> Optional[tuple[EditType, str]]:
  for prefix, edit_type in FILE_PREFIXES:
    if line.startswith(prefix):
      path = column(line, len(prefix))
      return (edit_type, path) if path else None
  return None


def _emit(entry: Optional[EntryContext]) -> Optional[ChangeEntry]:
  return entry.build() if entry is not None else None


def step(state: ParserState, entry: Optional[EntryContext], line: str) -> StepResult:
  """
  Advance the state machine by one line

  Args:
    state: Current state
    entry: Entry under construction, None before the first day header
    line: Next input line without its terminator

  Returns:
    (next state, entry under construction, entry emitted by this line or None)

  Raises:
    ParserInternalError: If state is not a known ParserState
  """
  if line.startswith(DAY_HEADER_PREFIX):
    emitted = _emit(entry)
    try:
      day = parse_day_header(line)
    except MalformedLine:
      logger.debug(f"Skipping short day header: {line!r}")
      return ParserState.SEEKING, None, emitted
    return ParserState.EXPECT_CHECKIN, EntryContext(date=day), emitted

  match state:
    case ParserState.SEEKING:
      return state, entry, None

    case ParserState.EXPECT_CHECKIN:
      checkin = parse_checkin_line(line)
      if checkin is None or entry is None:
        logger.debug(f"Expected checkin line, got: {line!r}")
        return state, entry, None
      entry.start_checkin(*checkin)
      return ParserState.BODY, entry, None

    case ParserState.BODY:
      if entry is None:
        raise ParserInternalError("No entry under construction in body state")

      if line.startswith(CONTINUATION_INDENT):
        entry.add_continuation(column(line, len(CONTINUATION_INDENT)).strip())
        return state, entry, None

      checkin = parse_checkin_line(line)
      if checkin is not None:
        emitted = entry.build()
        entry = EntryContext(date=entry.date)
        entry.start_checkin(*checkin)
        return state, entry, emitted

      file_change = parse_file_line(line)
      if file_change is not None:
        entry.add_file(*file_change)
        return state, entry, None

      # Resynchronize; the open entry is emitted at the next header or end of input
      logger.debug(f"Unrecognized line in checkin body, seeking next day: {line!r}")
      return ParserState.SEEKING, entry, None

    case _:
      logger.warning(f"Unknown parser state: {state}")
      raise ParserInternalError(f"Unknown timeline parser state: {state}")


class TimelineParser:
  """Turns a fossil timeline dump into a ChangeLogCollection"""

  def parse(self, lines: Iterable[str]) -> ChangeLogCollection:
    state = ParserState.SEEKING
    entry: Optional[EntryContext] = None
    entries: list[ChangeEntry] = []

    for raw_line in lines:
      state, entry, emitted = step(state, entry, raw_line.rstrip("\r\n"))
      if emitted is not None:
        entries.append(emitted)

    # Last checkin is still open at end of input
    last = _emit(entry)
    if last is not None:
      entries.append(last)

    logger.debug(f"Parsed {len(entries)} timeline entries")
    return ChangeLogCollection(entries=tuple(entries))

  def parse_text(self, text: str) -> ChangeLogCollection:
    return self.parse(text.split("\n"))

  def parse_bytes(self, data: bytes, encoding: str = "utf-8") -> ChangeLogCollection:
    return self.parse_text(data.decode(encoding, errors="replace"))

  def parse_file(self, changelog_path: Path | str) -> ChangeLogCollection:
    """Parse a changelog file written by range_diff.write_changelog"""
    with open(changelog_path, "r", encoding="utf-8", errors="replace") as f:
      return self.parse(f)


def parse_timeline(text: str) -> ChangeLogCollection:
  """Parse timeline text into a ChangeLogCollection"""
  return TimelineParser().parse_text(text)
