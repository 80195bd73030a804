"""
Parser for the fossil server's timeline.rss feed.

Only the first item's <guid> matters: it is a link ending in the full
checkin hash of the repository tip, e.g.
  <guid>http://127.0.0.1:8080/info/bef42e8c2fcc51254daf5fe87b2c562c72abc103</guid>
"""

import logging

from .changelog_types import RevisionState
from .exceptions import MissingFeedGuid

logger = logging.getLogger(__name__)

GUID_OPEN = "<guid>"
GUID_CLOSE = "</guid>"


def _first_guid(rss: str) -> str:
  start = rss.find(GUID_OPEN)
  if start < 0:
    raise MissingFeedGuid("Feed contains no <guid> element")

  end = rss.find(GUID_CLOSE, start)
  if end < 0:
    raise MissingFeedGuid(f"Feed has {GUID_OPEN} at offset {start} but no {GUID_CLOSE}")

  return rss[start + len(GUID_OPEN) : end].strip()


def parse_rss(rss: str) -> RevisionState:
  """
  Extract the tip revision from a fossil RSS feed

  Args:
    rss: Whole feed text

  Returns:
    RevisionState for the most recent checkin, with an empty id when the feed
    has no usable <guid>
  """
  try:
    url = _first_guid(rss)
  except MissingFeedGuid as e:
    if rss:
      logger.warning(f"{e.description}; reporting empty revision")
    return RevisionState("")

  return RevisionState(url[url.rfind("/") + 1 :])


class FeedParser:
  def parse(self, feed_text: str) -> RevisionState:
    return parse_rss(feed_text)
