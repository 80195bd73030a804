"""Runs the fossil executable and reads the server feed.

This is the only module that touches processes or the network. It produces
the raw text the parsers consume and turns every failure into
ExternalFetchFailure.
"""

import base64
import logging
import subprocess
from http.client import HTTPException
from pathlib import Path
from typing import Optional
from urllib.error import URLError
from urllib.request import Request, urlopen

from .changelog_types import RevisionState
from .config import AppConfig, ScmConfig
from .exceptions import ExternalFetchFailure
from .info_parser import checkout_revision, parse_info
from .rss_parser import parse_rss

logger = logging.getLogger(__name__)


class FossilClient:
  """Fossil commands run inside one workspace"""

  def __init__(
    self,
    workspace: Path | str = ".",
    repository: str = "",
    executable: str = AppConfig.FOSSIL_EXECUTABLE,
    timeline_limit: int = AppConfig.TIMELINE_LIMIT,
    timeout: Optional[float] = AppConfig.FETCH_TIMEOUT,
  ):
    self.workspace = Path(workspace)
    self.repository = repository
    self.executable = executable
    self.timeline_limit = timeline_limit
    self.timeout = timeout

  @classmethod
  def from_config(cls, config: ScmConfig, workspace: Path | str = ".") -> "FossilClient":
    return cls(
      workspace=workspace,
      repository=config.repository,
      executable=config.fossil_executable,
    )

  def _run(self, *args: str) -> bytes:
    cmd = [self.executable, *args]
    try:
      result = subprocess.run(
        cmd,
        cwd=self.workspace,
        capture_output=True,
        timeout=self.timeout,
      )
    except (OSError, subprocess.TimeoutExpired) as e:
      logger.error(f"Failed to run {' '.join(cmd)}: {e}")
      raise ExternalFetchFailure.from_exception(e, context=f"Failed to run {args[0]}") from e

    if result.returncode != 0:
      stderr = result.stderr.decode("utf-8", errors="replace").strip()
      logger.error(f"{' '.join(cmd)} returned {result.returncode}: {stderr}")
      raise ExternalFetchFailure(
        f"fossil {args[0]} returned {result.returncode}",
        caused_by=stderr or None,
      )
    return result.stdout

  def timeline_before(self, revision: RevisionState) -> bytes:
    """Full checkin timeline ending at revision, newest first"""
    return self._run(
      "timeline", "before", revision.rev_id, "-n", str(self.timeline_limit), "-t", "ci"
    )

  def close(self) -> None:
    self._run("close", "--force")

  def current_revision(self) -> Optional[RevisionState]:
    """
    Revision of the repository file in the workspace

    Opens the repository with --keep (leaves files alone), reads the checkout
    hash from the info block it prints, then closes it again.

    Returns:
      RevisionState, or None if the repository is missing or has no checkout line
    """
    if not self.repository:
      raise ExternalFetchFailure("Cannot find repo therefore cannot obtain revision state.")

    if not (self.workspace / self.repository).exists():
      logger.warning(f"No repository at {self.workspace / self.repository}")
      return None

    output = self._run("open", self.repository, "--keep")
    try:
      info = parse_info(output.decode("utf-8", errors="replace"))
    finally:
      self.close()

    revision = checkout_revision(info)
    if revision is None:
      logger.warning(f"Unable to determine hash for repository '{self.repository}'")
    return revision


def fetch_feed(
  url: str,
  username: str = "",
  password: str = "",
  timeout: Optional[float] = AppConfig.FETCH_TIMEOUT,
) -> str:
  """
  Read the RSS feed at url

  Args:
    url: Feed URL without credentials
    username: Sent with password as HTTP basic auth when not empty
    password: Password for username
    timeout: Socket timeout in seconds

  Raises:
    ExternalFetchFailure: If the URL is invalid or the server cannot be read
  """
  try:
    request = Request(url)
    if username:
      token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
      request.add_header("Authorization", f"Basic {token}")
    with urlopen(request, timeout=timeout) as response:
      return response.read().decode("utf-8", errors="replace")
  except (URLError, HTTPException, OSError, ValueError) as e:
    raise ExternalFetchFailure.from_exception(e, context="Failed to read timeline feed") from e


def remote_revision(config: ScmConfig) -> RevisionState:
  """Tip revision of the configured server"""
  logger.info(f"Getting current remote revision from {config.server_url()}")
  return parse_rss(fetch_feed(config.feed_url(), config.username, config.password))
