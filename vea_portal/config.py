"""Configuration for the portal client and dashboard builder."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import voluptuous as vol
from dotenv import load_dotenv

from .const import (
	CONF_API_TOKEN,
	CONF_BASE_URL,
	CONF_INSIGHT_CACHE_SIZE,
	CONF_TIMEOUT,
	DEFAULT_BASE_URL,
	DEFAULT_INSIGHT_CACHE_SIZE,
	DEFAULT_TIMEOUT_SECONDS,
)
from .exceptions import PortalConfigError

_LOGGER = logging.getLogger(__name__)


def _base_url(value: Any) -> str:
	text = vol.Coerce(str)(value).strip().rstrip("/")
	if not text.startswith(("http://", "https://")):
		raise vol.Invalid("base URL must start with http:// or https://")
	return text


CONFIG_SCHEMA = vol.Schema(
	{
		vol.Optional(CONF_BASE_URL, default=DEFAULT_BASE_URL): _base_url,
		vol.Optional(CONF_API_TOKEN, default=None): vol.Any(None, vol.All(str, vol.Length(min=1))),
		vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT_SECONDS): vol.All(
			vol.Coerce(float), vol.Range(min=1)
		),
		vol.Optional(CONF_INSIGHT_CACHE_SIZE, default=DEFAULT_INSIGHT_CACHE_SIZE): vol.All(
			vol.Coerce(int), vol.Range(min=1)
		),
	},
	extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class PortalConfig:
	"""Validated settings."""
	base_url: str = DEFAULT_BASE_URL
	api_token: Optional[str] = None
	timeout: float = float(DEFAULT_TIMEOUT_SECONDS)
	insight_cache_size: int = DEFAULT_INSIGHT_CACHE_SIZE

	@classmethod
	def from_mapping(cls, data: Mapping[str, Any]) -> "PortalConfig":
		"""Validate raw settings keyed by their environment variable names."""
		# Empty environment variables count as unset
		raw = {key: value for key, value in data.items() if value not in (None, "")}
		try:
			validated = CONFIG_SCHEMA(raw)
		except vol.Invalid as e:
			raise PortalConfigError(f"Invalid portal configuration: {e}") from e

		return cls(
			base_url=validated[CONF_BASE_URL],
			api_token=validated[CONF_API_TOKEN],
			timeout=validated[CONF_TIMEOUT],
			insight_cache_size=validated[CONF_INSIGHT_CACHE_SIZE],
		)


def load_config(env_file: Optional[Union[str, Path]] = None) -> PortalConfig:
	"""Load settings from the environment, reading a ``.env`` file first.

	Variables already set in the environment win over the file.
	"""
	if env_file is not None:
		loaded = load_dotenv(env_file)
	else:
		loaded = load_dotenv()
	if loaded:
		_LOGGER.debug("Loaded settings from .env file")

	keys = (CONF_BASE_URL, CONF_API_TOKEN, CONF_TIMEOUT, CONF_INSIGHT_CACHE_SIZE)
	return PortalConfig.from_mapping({key: os.environ.get(key) for key in keys})
