"""Fossil changelog extraction.

Parses the text output of the fossil client (timeline dumps, info blocks,
timeline.rss) and computes the changelog between two revisions.
"""

from .changelog_types import (
  AffectedFile,
  ChangeEntry,
  ChangeLogCollection,
  EditType,
  RevisionState,
)
from .exceptions import (
  ConfigError,
  ExternalFetchFailure,
  FossilScmError,
  MalformedLine,
  MissingFeedGuid,
  ParserInternalError,
  TruncatedInfoBlock,
)
from .info_parser import InfoBlockParser, InfoRecord, checkout_revision, parse_info
from .range_diff import RangeDiffer, changelog_between, diff_range, write_changelog
from .rss_parser import FeedParser, parse_rss
from .timeline_parser import TimelineParser, parse_timeline

__all__ = [
  "AffectedFile",
  "ChangeEntry",
  "ChangeLogCollection",
  "EditType",
  "RevisionState",
  "ConfigError",
  "ExternalFetchFailure",
  "FossilScmError",
  "MalformedLine",
  "MissingFeedGuid",
  "ParserInternalError",
  "TruncatedInfoBlock",
  "InfoBlockParser",
  "InfoRecord",
  "checkout_revision",
  "parse_info",
  "RangeDiffer",
  "changelog_between",
  "diff_range",
  "write_changelog",
  "FeedParser",
  "parse_rss",
  "TimelineParser",
  "parse_timeline",
]
