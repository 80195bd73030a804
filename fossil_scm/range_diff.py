"""Changelog between two revisions.

`fossil timeline before X` lists everything up to X, newest first. The
timeline before the old revision is therefore the tail of the timeline before
the new one, and the changes in between are the leading
len(new) - len(old) bytes. This costs two fetches instead of searching the
dump for the old id, which could also match inside a checkin comment.
"""

import logging
from pathlib import Path
from typing import Callable

from .changelog_types import ChangeLogCollection, RevisionState
from .exceptions import ExternalFetchFailure
from .timeline_parser import TimelineParser

logger = logging.getLogger(__name__)

FetchTimeline = Callable[[RevisionState], bytes]


def diff_range(
  old_revision: RevisionState,
  new_revision: RevisionState,
  fetch_timeline_before: FetchTimeline,
  verify_suffix: bool = False,
) -> bytes:
  """
  Return the timeline text for checkins after old_revision up to new_revision

  Args:
    old_revision: Revision of the previous build
    new_revision: Revision being built now
    fetch_timeline_before: Returns the full timeline ending at a revision;
      raises ExternalFetchFailure when the fossil command fails
    verify_suffix: Also require the old timeline to be a byte suffix of the new one

  Returns:
    Leading part of the new timeline that the old timeline does not cover

  Raises:
    ExternalFetchFailure: If a fetch fails or the two timelines do not line up
  """
  # Sequential on purpose: concurrent fossil commands on one checkout are not safe
  new_timeline = fetch_timeline_before(new_revision)
  old_timeline = fetch_timeline_before(old_revision)

  delta_length = len(new_timeline) - len(old_timeline)
  if delta_length < 0:
    logger.error(
      f"Timeline before {old_revision.rev_id} ({len(old_timeline)} bytes) is longer "
      f"than timeline before {new_revision.rev_id} ({len(new_timeline)} bytes)"
    )
    raise ExternalFetchFailure(
      f"Timeline before {old_revision.rev_id} is not a suffix of timeline "
      f"before {new_revision.rev_id}",
      source="range_diff",
    )

  if verify_suffix and not new_timeline.endswith(old_timeline):
    raise ExternalFetchFailure(
      f"History changed between {old_revision.rev_id} and {new_revision.rev_id}",
      source="range_diff",
    )

  logger.info(
    f"Changelog {old_revision.rev_id}..{new_revision.rev_id}: {delta_length} bytes"
  )
  return new_timeline[:delta_length]


def write_changelog(
  changelog_path: Path | str,
  old_revision: RevisionState,
  new_revision: RevisionState,
  fetch_timeline_before: FetchTimeline,
  verify_suffix: bool = False,
) -> int:
  """
  Write the changelog between two revisions to a file

  The file is only written when the diff succeeds, so a failed diff leaves the
  previous changelog in place.

  Returns:
    Number of bytes written
  """
  delta = diff_range(old_revision, new_revision, fetch_timeline_before, verify_suffix)
  changelog_path = Path(changelog_path)
  changelog_path.write_bytes(delta)
  logger.debug(f"Wrote {len(delta)} bytes to {changelog_path}")
  return len(delta)


def changelog_between(
  old_revision: RevisionState,
  new_revision: RevisionState,
  fetch_timeline_before: FetchTimeline,
  verify_suffix: bool = False,
) -> ChangeLogCollection:
  """Diff two revisions and parse the result"""
  delta = diff_range(old_revision, new_revision, fetch_timeline_before, verify_suffix)
  return TimelineParser().parse_bytes(delta)


class RangeDiffer:
  def __init__(self, fetch_timeline_before: FetchTimeline, verify_suffix: bool = False):
    self.fetch_timeline_before = fetch_timeline_before
    self.verify_suffix = verify_suffix

  def diff_range(self, old_revision: RevisionState, new_revision: RevisionState) -> bytes:
    return diff_range(
      old_revision, new_revision, self.fetch_timeline_before, self.verify_suffix
    )
