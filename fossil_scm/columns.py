"""Bounds-checked fixed-column slicing for fossil's text output"""

from typing import Optional

from .exceptions import ErrorSource, MalformedLine


def column(
  line: str, start: int, end: Optional[int] = None, source: ErrorSource = "timeline"
) -> str:
  """
  Slice line[start:end], failing instead of silently returning a short string

  Args:
    line: A single line without its terminator
    start: First column of the field
    end: Column after the last one of the field, or None for end of line
    source: Error source recorded on the MalformedLine

  Returns:
    The sliced field

  Raises:
    MalformedLine: If the line does not reach the requested columns
  """
  required = start if end is None else end
  if len(line) < required:
    raise MalformedLine(
      f"Line too short for columns {start}..{'' if end is None else end}: {line!r}",
      source=source,
    )
  return line[start:end]
