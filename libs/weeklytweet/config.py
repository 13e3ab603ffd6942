import dataclasses as dc
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .oauth1 import Base64Variant, Credentials, SignatureMethod

logger = logging.getLogger(__name__)

# Environment variable which may point to a YAML settings file.
SETTINGS_FILE_ENV = "WEEKLY_TWEET_SETTINGS_FILE"

# Settings key -> environment variable for all secrets.
SECRET_ENV_VARS = {
    "fathom_entity_id": "FATHOM_ENTITY_ID",
    "fathom_token": "FATHOM_TOKEN",
    "twitter_api_key": "TWITTER_API_KEY",
    "twitter_api_secret": "TWITTER_API_SECRET",
    "twitter_api_token": "TWITTER_API_TOKEN",
    "twitter_api_token_secret": "TWITTER_API_TOKEN_SECRET",
}


# Raised if the settings are incomplete or invalid
class ConfigError(RuntimeError):
    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super(ConfigError, self).__init__(message)
        self.missing = missing or []


@dc.dataclass(frozen=True)
class Settings:
    fathom_entity_id: str
    fathom_token: str
    credentials: Credentials
    fathom_url: str = "https://api.usefathom.com/v1/aggregations"
    twitter_url: str = "https://api.twitter.com/2/tweets"
    timezone: str = "Europe/London"
    top_count: int = 3
    period_days: int = 7
    blog_host: str = "polpiella.dev"
    hashtags: List[str] = dc.field(default_factory=lambda: ["#iosdev", "#swiftlang"])
    timeout: float = 30.
    signature_method: SignatureMethod = SignatureMethod.HMAC_SHA1
    base64_variant: Base64Variant = Base64Variant.STANDARD

    def __post_init__(self):
        if not 1 <= self.top_count <= 9:
            raise ValueError(f"top_count must be between 1 and 9, got {self.top_count}.")
        if self.period_days < 1:
            raise ValueError(f"period_days must be positive, got {self.period_days}.")
        if not isinstance(self.hashtags, list) or not all(isinstance(tag, str) for tag in self.hashtags):
            raise ValueError(f"hashtags must be a list of strings, got {self.hashtags!r}.")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ValueError(f"timeout must be a positive number of seconds, got {self.timeout!r}.")


def read_settings_file(path: str) -> Dict[str, Any]:
    logger.info(f"Reading settings from {path}")
    try:
        with open(path, "r", encoding="utf-8") as settings_file:
            content = yaml.safe_load(settings_file)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping.")
    return content


def _enum_option(enum_type, value, name: str):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError as e:
        choices = ", ".join(item.value for item in enum_type)
        raise ConfigError(f"Invalid value `{value}` for `{name}`, expected one of: {choices}.") from e


def load_settings(settings_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Brief

        Assemble the job settings. Secrets are read from the environment,
        everything else from an optional YAML file. Secrets given in the
        file are overridden by environment variables.

    Arguments

        `settings_file`: (Optional) Path to a YAML file. Defaults to the
          value of WEEKLY_TWEET_SETTINGS_FILE, if set.

        `environ`: (Optional) Environment mapping, defaults to os.environ.
    """
    environ = os.environ if environ is None else environ
    settings_file = settings_file or environ.get(SETTINGS_FILE_ENV)
    values = read_settings_file(settings_file) if settings_file else {}

    unknown = set(values) - {f.name for f in dc.fields(Settings) if f.name != "credentials"} - set(SECRET_ENV_VARS)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}.")

    secrets = {}
    missing = []
    for key, env_var in SECRET_ENV_VARS.items():
        file_value = values.pop(key, None)
        value = environ.get(env_var) or file_value
        if not value:
            missing.append(env_var)
        else:
            secrets[key] = str(value)
    if missing:
        raise ConfigError(f"Missing environment variables: {', '.join(missing)}", missing)

    if "signature_method" in values:
        values["signature_method"] = _enum_option(SignatureMethod, values["signature_method"], "signature_method")
    if "base64_variant" in values:
        values["base64_variant"] = _enum_option(Base64Variant, values["base64_variant"], "base64_variant")

    try:
        return Settings(
            fathom_entity_id=secrets["fathom_entity_id"],
            fathom_token=secrets["fathom_token"],
            credentials=Credentials(
                consumer_key=secrets["twitter_api_key"],
                consumer_secret=secrets["twitter_api_secret"],
                token=secrets["twitter_api_token"],
                token_secret=secrets["twitter_api_token_secret"]),
            **values)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid settings: {e}") from e
