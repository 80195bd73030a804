"""Decide whether the remote repository moved since the last build"""

import logging
from enum import Enum
from typing import Callable, Optional

from .changelog_types import RevisionState
from .client import remote_revision
from .config import ScmConfig

logger = logging.getLogger(__name__)


class PollingResult(str, Enum):
  NO_CHANGES = "no_changes"
  SIGNIFICANT = "significant"


def compare_revisions(
  baseline: Optional[RevisionState], current: RevisionState
) -> PollingResult:
  """NO_CHANGES iff both states name the same checkin"""
  if baseline is None:
    logger.info(f"No baseline, current is {current.display_name}")
    return PollingResult.SIGNIFICANT

  if baseline == current:
    logger.info(f"baseline: {baseline.display_name} == {current.display_name}")
    return PollingResult.NO_CHANGES

  logger.info(f"baseline: {baseline.display_name} != {current.display_name}")
  return PollingResult.SIGNIFICANT


def poll(
  config: ScmConfig,
  baseline: Optional[RevisionState],
  get_remote_revision: Callable[[ScmConfig], RevisionState] = remote_revision,
) -> PollingResult:
  return compare_revisions(baseline, get_remote_revision(config))
