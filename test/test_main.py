"""
Test the command line entry point
Run with: pytest test/test_main.py
"""

import json

import pytest

from fossil_scm import main as main_module
from fossil_scm.changelog_types import RevisionState
from fossil_scm.exceptions import ExternalFetchFailure


@pytest.fixture
def timeline_file(tmp_path):
  path = tmp_path / "timeline.txt"
  path.write_text(
    "=== 2012-06-10 ===\n"
    "20:34:57 [31eb532808] first checkin. (user: x tags: trunk)\n"
    "   ADDED a.txt\n"
  )
  return path


def test_timeline_command(timeline_file, capsys):
  assert main_module.main(["timeline", str(timeline_file)]) == 0

  data = json.loads(capsys.readouterr().out)
  assert data["entries"][0]["commit_id"] == "31eb532808"
  assert data["entries"][0]["files"] == [{"edit_type": "add", "path": "a.txt"}]


def test_info_command_on_empty_file(tmp_path, capsys):
  info_file = tmp_path / "info.txt"
  info_file.write_text("")

  assert main_module.main(["info", str(info_file)]) == 0
  assert json.loads(capsys.readouterr().out) == {}


def test_feed_command(tmp_path, capsys):
  feed_file = tmp_path / "feed.rss"
  feed_file.write_text("<guid>http://host/info/abc123</guid>")

  assert main_module.main(["feed", str(feed_file)]) == 0
  assert capsys.readouterr().out.strip() == "abc123"


def test_diff_command_writes_changelog(monkeypatch, tmp_path, capsys):
  timelines = {"new": b"NEWOLD", "old": b"OLD"}

  def fake_timeline_before(self, revision: RevisionState) -> bytes:
    return timelines[revision.rev_id]

  monkeypatch.setattr(main_module.FossilClient, "timeline_before", fake_timeline_before)
  changelog_file = tmp_path / "changelog.txt"

  assert main_module.main(["diff", "old", "new", "--changelog", str(changelog_file)]) == 0
  assert changelog_file.read_bytes() == b"NEW"


def test_diff_command_failure_exit_code(monkeypatch, capsys):
  def failing_timeline_before(self, revision: RevisionState) -> bytes:
    raise ExternalFetchFailure("fossil timeline returned 1")

  monkeypatch.setattr(main_module.FossilClient, "timeline_before", failing_timeline_before)

  assert main_module.main(["diff", "old", "new"]) == 1
  err = capsys.readouterr().err
  error = json.loads(err[err.index("{") :])
  assert error["name"] == "EXTERNAL_FETCH_FAILURE"
  assert error["source"] == "fetch"


def test_diff_command_uses_config(monkeypatch, tmp_path, capsys):
  config_file = tmp_path / "scm.yaml"
  config_file.write_text("repository: project.fossil\nfossil_executable: /opt/fossil/bin/fossil\n")
  clients = []

  def fake_timeline_before(self, revision: RevisionState) -> bytes:
    clients.append((self.executable, self.repository))
    return {"new": b"NEWOLD", "old": b"OLD"}[revision.rev_id]

  monkeypatch.setattr(main_module.FossilClient, "timeline_before", fake_timeline_before)

  assert main_module.main(["diff", "old", "new", "--config", str(config_file)]) == 0
  assert capsys.readouterr().out == "NEW"
  assert clients == [("/opt/fossil/bin/fossil", "project.fossil")] * 2


def test_diff_command_fossil_flag_overrides_config(monkeypatch, tmp_path):
  config_file = tmp_path / "scm.yaml"
  config_file.write_text("repository: project.fossil\nfossil_executable: /opt/fossil/bin/fossil\n")
  executables = []

  def fake_timeline_before(self, revision: RevisionState) -> bytes:
    executables.append(self.executable)
    return b""

  monkeypatch.setattr(main_module.FossilClient, "timeline_before", fake_timeline_before)

  assert main_module.main(["diff", "old", "new", "--config", str(config_file), "--fossil", "fossil2"]) == 0
  assert executables == ["fossil2", "fossil2"]
