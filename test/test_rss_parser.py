"""
Test the timeline.rss parser
Run with: pytest test/test_rss_parser.py
"""

import pytest

from fossil_scm.changelog_types import RevisionState
from fossil_scm.rss_parser import FeedParser, parse_rss

FEED_HEAD = (
  '<?xml version="1.0"?>'
  '<rss xmlns:dc="http://purl.org/dc/elements/1.1/" version="2.0">'
  "  <channel>"
  "    <title>fossil-jenkins-plugin</title>"
  "    <link>http://127.0.0.1:8080</link>"
  "    <description>fossil-jenkins-plugin</description>"
  "    <pubDate>Sun, 1 Jul 2012 19:53:20 GMT</pubDate>"
  "    <generator>Fossil version [5dd5d39e7c] 2012-03-19 12:45:47</generator>"
)
FEED_TAIL = "  </channel></rss>"


@pytest.fixture
def feed_with_item():
  return (
    FEED_HEAD
    + "    <item>"
    + "      <title>(no comment)</title>"
    + "      <link>http://127.0.0.1:8080/info/bef42e8c2fcc51254daf5fe87b2c562c72abc103</link>"
    + "      <dc:creator>perrella</dc:creator>"
    + "      <guid>http://127.0.0.1:8080/info/bef42e8c2fcc51254daf5fe87b2c562c72abc103</guid>"
    + "    </item>"
    + "    <item>"
    + "      <guid>http://127.0.0.1:8080/info/0000000000000000000000000000000000000000</guid>"
    + "    </item>"
    + FEED_TAIL
  )


def test_parse_rss(feed_with_item):
  """The first guid names the tip"""
  assert parse_rss(feed_with_item).rev_id == "bef42e8c2fcc51254daf5fe87b2c562c72abc103"


def test_parse_short_guid():
  assert FeedParser().parse("<guid>http://host/info/abc123</guid>") == RevisionState("abc123")


def test_parse_guid_with_whitespace():
  assert parse_rss("<guid>\n  http://host/info/abc123  \n</guid>").rev_id == "abc123"


def test_parse_rss_with_no_commit():
  """A feed without items gives an empty revision"""
  assert parse_rss(FEED_HEAD + FEED_TAIL).rev_id == ""


def test_parse_empty_rss():
  revision = parse_rss("")

  assert revision.rev_id == ""
  assert revision.is_empty


def test_parse_rss_missing_closing_guid():
  """An unterminated guid is treated like a missing one"""
  assert parse_rss(FEED_HEAD + "<item><guid>http://host/info/abc123").rev_id == ""
