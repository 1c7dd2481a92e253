"""Unit tests for configuration loading."""

import pytest

from vea_portal.config import PortalConfig, load_config
from vea_portal.const import CONF_API_TOKEN, CONF_BASE_URL, CONF_INSIGHT_CACHE_SIZE, CONF_TIMEOUT
from vea_portal.exceptions import PortalConfigError

KEYS = (CONF_BASE_URL, CONF_API_TOKEN, CONF_TIMEOUT, CONF_INSIGHT_CACHE_SIZE)


@pytest.fixture
def clean_env(monkeypatch):
	# setenv first so monkeypatch removes whatever load_dotenv adds afterwards
	for key in KEYS:
		monkeypatch.setenv(key, "")
		monkeypatch.delenv(key)
	return monkeypatch


def test_defaults():
	config = PortalConfig.from_mapping({})
	assert config == PortalConfig()
	assert config.base_url == "http://localhost:3000"
	assert config.api_token is None
	assert config.timeout == 30
	assert config.insight_cache_size == 64


def test_values_are_coerced():
	config = PortalConfig.from_mapping({
		CONF_BASE_URL: "https://portal.example.edu/",
		CONF_API_TOKEN: "abc",
		CONF_TIMEOUT: "12.5",
		CONF_INSIGHT_CACHE_SIZE: "8",
		"UNRELATED": "ignored",
	})
	assert config.base_url == "https://portal.example.edu"
	assert config.api_token == "abc"
	assert config.timeout == 12.5
	assert config.insight_cache_size == 8


def test_empty_values_count_as_unset():
	config = PortalConfig.from_mapping({CONF_API_TOKEN: "", CONF_TIMEOUT: None})
	assert config.api_token is None
	assert config.timeout == 30


@pytest.mark.parametrize(
	"data",
	[
		{CONF_BASE_URL: "portal.example.edu"},
		{CONF_TIMEOUT: "soon"},
		{CONF_TIMEOUT: "0"},
		{CONF_INSIGHT_CACHE_SIZE: "0"},
	],
)
def test_invalid_values_raise(data):
	with pytest.raises(PortalConfigError):
		PortalConfig.from_mapping(data)


def test_load_config_reads_env_file(clean_env, tmp_path):
	env_file = tmp_path / ".env"
	env_file.write_text(f"{CONF_BASE_URL}=https://school.test\n{CONF_API_TOKEN}=secret\n")
	clean_env.setenv(CONF_TIMEOUT, "5")

	config = load_config(env_file)
	assert config.base_url == "https://school.test"
	assert config.api_token == "secret"
	assert config.timeout == 5


def test_environment_wins_over_env_file(clean_env, tmp_path):
	env_file = tmp_path / ".env"
	env_file.write_text(f"{CONF_BASE_URL}=https://from-file.test\n")
	clean_env.setenv(CONF_BASE_URL, "https://from-env.test")

	assert load_config(env_file).base_url == "https://from-env.test"
