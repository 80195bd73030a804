"""
Custom exceptions for fossil_scm
"""

from typing import Literal, Optional, cast
from pydantic import BaseModel, Field


# All possible error sources in the package
ErrorSource = Literal[
  "timeline",  # Timeline dump parsing
  "info",  # `fossil info` / `fossil open --keep` block parsing
  "feed",  # timeline.rss parsing
  "range_diff",  # Changelog delta between two revisions
  "fetch",  # External fossil process or network read
  "config",  # Configuration loading and validation
  "unknown",  # Uncategorized errors
]


def is_fatal(source: ErrorSource) -> bool:
  """Whether errors from this source propagate to the caller"""
  if source in ["timeline", "info", "feed"]:
    return False  # Absorbed by the parsers
  elif source in ["range_diff", "fetch", "config", "unknown"]:
    return True
  else:
    # This should never be reached if all ErrorSource cases are covered
    return True


class ErrorResponse(BaseModel):
  """Serializable error description"""

  description: str = Field(..., description="Human-readable error message")
  name: str = Field(..., description="Unique error identifier")
  source: ErrorSource = Field(..., description="Where the error originated")
  caused_by: Optional[str] = Field(
    None, description="Original error details if this is a chained error"
  )


class FossilScmError(Exception):
  """
  Base class for all fossil_scm errors.
  """

  default_name: str = "FOSSIL_SCM_ERROR"
  default_source: ErrorSource = "unknown"

  def __init__(
    self,
    description: str,
    name: Optional[str] = None,
    source: Optional[ErrorSource] = None,
    caused_by: Optional[str] = None,
  ):
    """
    Initialize a fossil_scm error

    Args:
        description: Human-readable error message
        name: Unique error identifier (e.g., "EXTERNAL_FETCH_FAILURE")
        source: Where the error originated from
        caused_by: Original error details if this wraps another error
    """
    self.description: str = description
    self.name: str = name or self.default_name
    self.source: ErrorSource = source or self.default_source
    self.caused_by: Optional[str] = caused_by
    super().__init__(description)

  @property
  def fatal(self) -> bool:
    return is_fatal(self.source)

  def to_response(self) -> ErrorResponse:
    """Convert to ErrorResponse model for JSON output"""
    return ErrorResponse(
      description=self.description,
      name=self.name,
      source=cast(ErrorSource, self.source),
      caused_by=self.caused_by,
    )

  @classmethod
  def from_exception(
    cls,
    e: Exception,
    context: Optional[str] = None,
    name: Optional[str] = None,
    source: Optional[ErrorSource] = None,
  ) -> "FossilScmError":
    """
    Create an error of this class from an existing exception

    Args:
        e: The original exception
        context: Additional context to prepend to the description
        name: Error identifier, defaults to the class identifier
        source: Where this error originated, defaults to the class source

    Returns:
        Error with original exception details preserved
    """
    original_msg = str(e)
    description = f"{context}: {original_msg}" if context else original_msg

    return cls(
      description=description,
      name=name,
      source=source,
      caused_by=f"{e.__class__.__name__}: {original_msg}",
    )


class MalformedLine(FossilScmError):
  """A line is shorter than a fixed column offset or has an unexpected shape"""

  default_name = "MALFORMED_LINE"
  default_source = "timeline"


class TruncatedInfoBlock(FossilScmError):
  """An info block has fewer lines than the fixed layout requires"""

  default_name = "TRUNCATED_INFO_BLOCK"
  default_source = "info"


class MissingFeedGuid(FossilScmError):
  """A feed has no complete <guid>...</guid> pair"""

  default_name = "MISSING_FEED_GUID"
  default_source = "feed"


class ExternalFetchFailure(FossilScmError):
  """An external fossil command or network read could not produce output"""

  default_name = "EXTERNAL_FETCH_FAILURE"
  default_source = "fetch"


class ParserInternalError(FossilScmError):
  """The timeline state machine reached a state it does not know"""

  default_name = "PARSER_INTERNAL_ERROR"
  default_source = "timeline"

  @property
  def fatal(self) -> bool:
    return True


class ConfigError(FossilScmError):
  """Configuration file is missing or does not match the schema"""

  default_name = "CONFIG_ERROR"
  default_source = "config"
