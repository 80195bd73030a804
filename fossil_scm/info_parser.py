"""
Parser for the repository info block printed by `fossil info` and
`fossil open --keep`:

  project-name: Blabla
  repository:   C:/src/blabla/blabla
  local-root:   C:/src/myroot/
  user-home:    C:/Users/username/AppData/Local
  project-code: 640e13fdd114a5894d9fa42576432cf51379b6bf
  checkout:     886b406bcf4276879cc9d1c9869772991aeaf21e 2012-06-02 22:42:54 UTC
  parent:       2dd1b06dcc27781581f2bd2cbe269458ccf0b4ef 2012-06-02 22:18:35 UTC
  tags:         trunk
  comment:      made a comment  here.
                more stuff.(user: user2)

The layout is fixed: lines are read in this exact order and each label is
checked before its value is taken. Reordered output from a future fossil
release will drop fields rather than mislabel them.
"""

import logging
from typing import Dict, Optional

from .changelog_types import RevisionState
from .columns import column
from .exceptions import MalformedLine, TruncatedInfoBlock

logger = logging.getLogger(__name__)

InfoRecord = Dict[str, str]

MIN_INFO_LINES = 9
DATE_COLUMN = 55
VALUE_COLUMN = 14

# (label on the line, key in the record), in output order
SIMPLE_FIELDS = (
  ("project-name:", "project-name"),
  ("repository:", "repository"),
  ("local-root:", "local-root"),
  ("user-home:", "user-home"),
  ("project-code:", "project-code"),
)
DATED_FIELDS = (
  ("checkout:", "checkout"),
  ("parent:", "parent"),
)
TAGS_LABEL = "tags:"
COMMENT_LABEL = "comment:"


def _split_lines(text: str) -> list[str]:
  """Split on newlines only; form feeds and unicode separators in a comment stay on their line"""
  lines = [line.rstrip("\r") for line in text.split("\n")]
  while lines and not lines[-1]:
    lines.pop()
  return lines


def _fields(line: str) -> list[str]:
  return line.strip().split()


def _value_column(line: str) -> str:
  try:
    return column(line, VALUE_COLUMN, source="info").strip()
  except MalformedLine:
    return ""


class InfoBlockParser:
  """Turns an info block into an InfoRecord"""

  def parse(self, text: str) -> InfoRecord:
    try:
      return self._parse(_split_lines(text))
    except TruncatedInfoBlock as e:
      logger.warning(f"{e.description}; returning empty info record")
      return {}

  def _parse(self, lines: list[str]) -> InfoRecord:
    if len(lines) < MIN_INFO_LINES:
      raise TruncatedInfoBlock(
        f"Info block has {len(lines)} lines, expected at least {MIN_INFO_LINES}"
      )

    record: InfoRecord = {}
    linenum = 0

    for label, key in SIMPLE_FIELDS:
      field = _fields(lines[linenum])
      if len(field) > 1 and field[0] == label:
        record[key] = field[1]
      linenum += 1

    for label, key in DATED_FIELDS:
      line = lines[linenum]
      field = _fields(line)
      if len(field) > 1 and field[0] == label:
        record[key] = field[1]
        try:
          record[f"{key}-date"] = column(line, DATE_COLUMN, source="info").strip()
        except MalformedLine as e:
          logger.debug(f"No date for '{key}': {e.description}")
      linenum += 1

    field = _fields(lines[linenum])
    if field and field[0] == TAGS_LABEL:
      record["tags"] = _value_column(lines[linenum])
    linenum += 1

    # The comment is the last block in the output and may span several lines
    if lines[linenum].startswith(COMMENT_LABEL):
      record["comment"] = "".join(_value_column(line) + "\n" for line in lines[linenum:])
    else:
      record["comment"] = f"no comment block found. Found:'{lines[linenum]}'"

    return record


def parse_info(text: str) -> InfoRecord:
  """Parse an info block into a key/value mapping"""
  return InfoBlockParser().parse(text)


def checkout_revision(record: InfoRecord) -> Optional[RevisionState]:
  """Return the current checkout as a RevisionState, or None if it is missing"""
  checkout = record.get("checkout")
  if not checkout:
    return None
  return RevisionState(checkout)
