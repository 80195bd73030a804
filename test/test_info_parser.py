"""
Test the fossil info block parser
Run with: pytest test/test_info_parser.py
"""

import pytest

from fossil_scm.changelog_types import RevisionState
from fossil_scm.info_parser import InfoBlockParser, checkout_revision, parse_info


@pytest.fixture
def good_info():
  """Output of `fossil info` in an open checkout"""
  return (
    "project-name: Blabla\n"
    "repository:   C:/src/blabla/blabla\n"
    "local-root:   C:/src/myroot/\n"
    "user-home:    C:/Users/username/AppData/Local\n"
    "project-code: 640e13fdd114a5894d9fa42576432cf51379b6bf\n"
    "checkout:     886b406bcf4276879cc9d1c9869772991aeaf21e 2012-06-02 22:42:54 UTC\n"
    "parent:       2dd1b06dcc27781581f2bd2cbe269458ccf0b4ef 2012-06-02 22:18:35 UTC\n"
    "tags:         trunk\n"
    "comment:      made a comment  here. \n"
    "              more stuff.(user: user2)\n"
  )


def test_parse_empty_info():
  """Empty input gives an empty record"""
  assert parse_info("") == {}


def test_parse_truncated_info(good_info):
  """Fewer than nine lines gives an empty record"""
  truncated = "\n".join(good_info.splitlines()[:8])

  assert parse_info(truncated) == {}


def test_parse_good_info(good_info):
  """Every field of a complete block is extracted"""
  record = InfoBlockParser().parse(good_info)

  assert record == {
    "project-name": "Blabla",
    "repository": "C:/src/blabla/blabla",
    "local-root": "C:/src/myroot/",
    "user-home": "C:/Users/username/AppData/Local",
    "project-code": "640e13fdd114a5894d9fa42576432cf51379b6bf",
    "checkout": "886b406bcf4276879cc9d1c9869772991aeaf21e",
    "checkout-date": "2012-06-02 22:42:54 UTC",
    "parent": "2dd1b06dcc27781581f2bd2cbe269458ccf0b4ef",
    "parent-date": "2012-06-02 22:18:35 UTC",
    "tags": "trunk",
    "comment": "made a comment  here.\nmore stuff.(user: user2)\n",
  }


def test_mislabelled_line_is_left_out(good_info):
  """A line with an unexpected label does not produce its key"""
  lines = good_info.splitlines()
  lines[1] = "repo-path:    C:/src/blabla/blabla"

  record = parse_info("\n".join(lines))

  assert "repository" not in record
  assert record["project-name"] == "Blabla"
  assert record["checkout"] == "886b406bcf4276879cc9d1c9869772991aeaf21e"


def test_missing_comment_label(good_info):
  """A block without `comment:` in the comment position stores a placeholder"""
  lines = good_info.splitlines()
  lines[8] = "check-ins:    42"

  record = parse_info("\n".join(lines))

  assert record["comment"] == "no comment block found. Found:'check-ins:    42'"


def test_checkout_without_date(good_info):
  """A short checkout line still yields the hash"""
  lines = good_info.splitlines()
  lines[5] = "checkout:     886b406bcf"

  record = parse_info("\n".join(lines))

  assert record["checkout"] == "886b406bcf"
  assert "checkout-date" not in record


def test_checkout_revision(good_info):
  assert checkout_revision(parse_info(good_info)) == RevisionState(
    "886b406bcf4276879cc9d1c9869772991aeaf21e"
  )
  assert checkout_revision({}) is None


@pytest.mark.parametrize("separator", ["\x0c", "\x1c", "\u2028", "\x85"])
def test_separator_in_comment_keeps_line(good_info, separator):
  """Only \\n ends a line; other line separators stay inside the comment"""
  text = good_info.replace("made a comment  here.", f"made a{separator}comment  here.")

  record = parse_info(text)

  assert record["tags"] == "trunk"
  assert record["comment"] == f"made a{separator}comment  here.\nmore stuff.(user: user2)\n"


def test_crlf_line_endings(good_info):
  record = parse_info(good_info.replace("\n", "\r\n"))

  assert record == parse_info(good_info)
  assert record["checkout-date"] == "2012-06-02 22:42:54 UTC"
