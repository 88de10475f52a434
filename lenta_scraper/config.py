"""
Configuration Management
=======================

Scraper settings come from a YAML/JSON file, then LENTA_* environment
variables (optionally from a .env file) override individual values.

    proxy: http://45.11.21.182:3000
    proxy_user: user
    proxy_pass: secret
    address: Москва, Тверская улица, 1
    categories:
      - https://lenta.com/catalog/moloko-syr-yajjca-602/
    out_csv: dump.csv
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


DEFAULT_OUT_CSV = "dump.csv"
DEFAULT_TIMEOUT_SEC = 90
DEFAULT_SCROLLS = 6
DEFAULT_HOME_URL = "https://lenta.com"

# Environment variable -> config field
ENV_OVERRIDES = {
    'LENTA_PROXY': 'proxy',
    'LENTA_PROXY_USER': 'proxy_user',
    'LENTA_PROXY_PASS': 'proxy_pass',
    'LENTA_ADDRESS': 'address',
    'LENTA_CATEGORIES': 'categories',
    'LENTA_OUT_CSV': 'out_csv',
    'LENTA_HEADLESS': 'headless',
    'LENTA_TIMEOUT_SEC': 'timeout_sec',
    'LENTA_SCROLLS': 'scrolls',
    'LENTA_SKIP_ADDRESS': 'skip_address',
    'LENTA_HOME_URL': 'home_url',
}


class ConfigError(ValueError):
    """Config file missing, malformed or incomplete."""


class ScraperConfig(BaseModel):
    """Settings for one scraping run."""
    proxy: str = Field(default="", description="Proxy server, e.g. http://45.11.21.182:3000 (required)")
    proxy_user: str = Field(default="", description="Proxy login")
    proxy_pass: str = Field(default="", description="Proxy password")
    address: str = Field(default="", description="Delivery address; prices depend on the selected store (required)")
    categories: List[str] = Field(default_factory=list, description="Category page URLs to browse (required)")
    out_csv: str = Field(default=DEFAULT_OUT_CSV, description="Output CSV path")
    headless: bool = Field(default=False, description="Run the browser without a window")
    timeout_sec: int = Field(default=DEFAULT_TIMEOUT_SEC, description="Timeout per step (address, each category)")
    scrolls: int = Field(default=DEFAULT_SCROLLS, description="Scrolls per category page")
    skip_address: bool = Field(default=False, description="Skip delivery address selection")
    home_url: str = Field(default=DEFAULT_HOME_URL, description="Store home page, used for address selection")

    @field_validator('proxy', 'proxy_user', 'proxy_pass', 'address', mode='before')
    @classmethod
    def _blank_to_empty(cls, value):
        # "proxy_user:" with nothing after it loads as None from YAML
        return "" if value is None else str(value).strip()

    @field_validator('home_url', mode='before')
    @classmethod
    def _default_home_url(cls, value):
        return value or DEFAULT_HOME_URL

    @field_validator('out_csv', mode='before')
    @classmethod
    def _default_out_csv(cls, value):
        return value or DEFAULT_OUT_CSV

    @field_validator('timeout_sec', mode='before')
    @classmethod
    def _default_timeout(cls, value):
        if value is None or value == "" or int(value) <= 0:
            return DEFAULT_TIMEOUT_SEC
        return value

    @field_validator('scrolls', mode='before')
    @classmethod
    def _default_scrolls(cls, value):
        if value is None or value == "" or int(value) <= 0:
            return DEFAULT_SCROLLS
        return value

    @field_validator('categories', mode='before')
    @classmethod
    def _split_categories(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(',')
        return [c.strip() for c in value if c and str(c).strip()]

    @model_validator(mode='after')
    def _check_required(self):
        # A proxy is mandatory for every run
        if not self.proxy:
            raise ValueError("proxy is required (proxy must be used)")
        # Required even with skip_address: selection is part of a normal run
        if not self.address:
            raise ValueError("address is required")
        if not self.categories:
            raise ValueError("categories are required")
        return self


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML or JSON config file into a dict."""
    path = Path(path)
    try:
        with open(path, encoding='utf-8') as f:
            if path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"malformed config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a mapping, got {type(data).__name__}")
    return data


def env_overrides(environ=None) -> Dict[str, Any]:
    """Collect LENTA_* overrides from the environment."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for var, field_name in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value is None or value == "":
            continue
        if field_name in ('headless', 'skip_address'):
            value = value.strip().lower() in ('1', 'true', 'yes', 'on')
        overrides[field_name] = value
    return overrides


def load_config(path: Optional[Union[str, Path]] = None, env_file: Optional[str] = None, environ=None) -> ScraperConfig:
    """
    Load and validate the scraper config.

    Args:
        path: YAML/JSON config file (optional if everything comes from env)
        env_file: .env file to load first (default: .env in the working dir)
        environ: Mapping to read overrides from (default: os.environ)

    Raises:
        ConfigError: file unreadable/malformed or required settings missing
    """
    if environ is None:
        load_dotenv(env_file or Path.cwd() / '.env')

    data = read_config_file(path) if path else {}
    data.update(env_overrides(environ))

    try:
        return ScraperConfig(**data)
    except ValidationError as e:
        messages = "; ".join(err['msg'].removeprefix('Value error, ') for err in e.errors())
        raise ConfigError(messages) from e
