"""
Configuration module for fossil_scm
Environment settings plus the per-repository YAML file
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from platformdirs import user_config_dir
from pydantic import BaseModel, ValidationError, field_validator

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

APP_NAME = "fossil-scm"
CONFIG_FILE_NAME = "scm.yaml"


class AppConfig:
  """Process-wide settings read from the environment"""

  # Fossil client
  FOSSIL_EXECUTABLE = os.getenv("FOSSIL_EXECUTABLE", "fossil")
  # Effectively unbounded `-n` for `fossil timeline`
  TIMELINE_LIMIT = int(os.getenv("FOSSIL_TIMELINE_LIMIT", "2000000"))
  FETCH_TIMEOUT: Optional[float] = (
    float(os.environ["FOSSIL_FETCH_TIMEOUT"]) if os.getenv("FOSSIL_FETCH_TIMEOUT") else None
  )

  # Logging
  LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class ScmConfig(BaseModel):
  """Connection settings for one fossil repository"""

  https: bool = False
  server: str = "example.com"
  port: str = ""
  serverpath: str = ""
  username: str = ""
  password: str = ""
  repository: str
  clean: bool = False
  fossil_executable: str = AppConfig.FOSSIL_EXECUTABLE

  @field_validator("repository")
  @classmethod
  def validate_repository(cls, v: str) -> str:
    """Repository file name cannot be empty"""
    if not v or not v.strip():
      raise ValueError("repository cannot be empty string")
    return v.strip()

  @field_validator("port", mode="before")
  @classmethod
  def parse_port(cls, v) -> str:
    """Accept ports written as YAML integers"""
    if v is None:
      return ""
    return str(v)

  @field_validator("fossil_executable")
  @classmethod
  def default_executable(cls, v: str) -> str:
    return v.strip() or "fossil"

  def _scheme(self) -> str:
    return "https" if self.https else "http"

  def _host(self) -> str:
    return self.server + (f":{self.port}" if self.port else "")

  def server_url(self) -> str:
    """Server URL without credentials, safe to log"""
    return f"{self._scheme()}://{self._host()}/{self.serverpath}"

  def authenticated_server_url(self) -> str:
    """Server URL with credentials for clone/pull. Never log this."""
    if not self.username:
      return self.server_url()
    return f"{self._scheme()}://{self.username}:{self.password}@{self._host()}/{self.serverpath}"

  def changeset_url(self, commit_id: str) -> str:
    """Repository browser link for a checkin"""
    url = self.server_url()
    if not url.endswith("/"):
      url = url + "/"
    return f"{url}info/{commit_id}"

  def feed_url(self) -> str:
    """timeline.rss restricted to checkins; the first item is the tip.

    Credentials are sent as a header by the client, never in this URL.
    """
    return f"{self.server_url().rstrip('/')}/timeline.rss?y=ci&n=0"


def default_config_path() -> Path:
  return Path(user_config_dir(APP_NAME)) / CONFIG_FILE_NAME


def load_scm_config(config_path: Path | str | None = None) -> ScmConfig:
  """
  Load repository settings from a YAML file

  Args:
      config_path: Path to the YAML file, defaults to the user config directory

  Returns:
      Validated ScmConfig

  Raises:
      ConfigError: If the file is missing, is not valid YAML, or does not match the schema
  """
  config_path = Path(config_path) if config_path else default_config_path()

  if not config_path.exists():
    raise ConfigError(f"Configuration file not found: {config_path}")

  try:
    with open(config_path, "r") as f:
      raw_config = yaml.safe_load(f) or {}
  except yaml.YAMLError as e:
    raise ConfigError.from_exception(e, context=f"Malformed YAML in {config_path}") from e

  if not isinstance(raw_config, dict):
    raise ConfigError(f"Expected a mapping in {config_path}, got {type(raw_config).__name__}")

  try:
    config = ScmConfig(**raw_config)
  except ValidationError as e:
    raise ConfigError.from_exception(e, context=f"Invalid configuration in {config_path}") from e

  logger.debug(f"Loaded configuration for {config.server_url()} from {config_path}")
  return config
