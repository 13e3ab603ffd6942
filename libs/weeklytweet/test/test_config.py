"""
Tests for settings loading from the environment and YAML files.
"""

import pytest

from weeklytweet.config import ConfigError, SETTINGS_FILE_ENV, load_settings
from weeklytweet.oauth1 import Base64Variant, Credentials, SignatureMethod

ENVIRON = {
    "FATHOM_ENTITY_ID": "ENTITY",
    "FATHOM_TOKEN": "fathom-token",
    "TWITTER_API_KEY": "K",
    "TWITTER_API_SECRET": "S",
    "TWITTER_API_TOKEN": "T",
    "TWITTER_API_TOKEN_SECRET": "TS",
}


def write_settings(tmp_path, content: str) -> str:
    path = tmp_path / "settings.yaml"
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestLoadSettings:

    def test_defaults_from_environment(self):
        settings = load_settings(environ=ENVIRON)
        assert settings.fathom_entity_id == "ENTITY"
        assert settings.fathom_token == "fathom-token"
        assert settings.credentials == Credentials("K", "S", "T", "TS")
        assert settings.fathom_url == "https://api.usefathom.com/v1/aggregations"
        assert settings.twitter_url == "https://api.twitter.com/2/tweets"
        assert settings.timezone == "Europe/London"
        assert settings.top_count == 3
        assert settings.period_days == 7
        assert settings.hashtags == ["#iosdev", "#swiftlang"]
        assert settings.signature_method == SignatureMethod.HMAC_SHA1
        assert settings.base64_variant == Base64Variant.STANDARD

    def test_missing_variables_are_all_reported(self):
        environ = dict(ENVIRON)
        del environ["FATHOM_TOKEN"]
        environ["TWITTER_API_TOKEN_SECRET"] = ""
        with pytest.raises(ConfigError) as exc_info:
            load_settings(environ=environ)
        assert exc_info.value.missing == ["FATHOM_TOKEN", "TWITTER_API_TOKEN_SECRET"]
        assert "FATHOM_TOKEN" in str(exc_info.value)

    def test_settings_file_options(self, tmp_path):
        path = write_settings(tmp_path, """
top_count: 5
blog_host: example.blog
hashtags: ["#python"]
signature_method: PLAINTEXT
base64_variant: line-wrapped-76
""")
        settings = load_settings(path, environ=ENVIRON)
        assert settings.top_count == 5
        assert settings.blog_host == "example.blog"
        assert settings.hashtags == ["#python"]
        assert settings.signature_method == SignatureMethod.PLAINTEXT
        assert settings.base64_variant == Base64Variant.LINE_WRAPPED_76

    def test_settings_file_from_environment(self, tmp_path):
        path = write_settings(tmp_path, "timezone: UTC\n")
        settings = load_settings(environ={**ENVIRON, SETTINGS_FILE_ENV: path})
        assert settings.timezone == "UTC"

    def test_environment_overrides_file_secrets(self, tmp_path):
        path = write_settings(tmp_path, "twitter_api_key: file-key\nfathom_token: file-token\n")
        environ = dict(ENVIRON)
        del environ["FATHOM_TOKEN"]
        settings = load_settings(path, environ=environ)
        assert settings.credentials.consumer_key == "K"
        assert settings.fathom_token == "file-token"

    def test_empty_file(self, tmp_path):
        path = write_settings(tmp_path, "")
        assert load_settings(path, environ=ENVIRON).top_count == 3

    @pytest.mark.parametrize("content", [
        "unknown_option: 1\n",
        "credentials: {}\n",
        "signature_method: RSA-SHA1\n",
        "base64_variant: url-safe\n",
        "top_count: 0\n",
        "top_count: 10\n",
        "top_count: three\n",
        "hashtags: \"#ios\"\n",
        "hashtags: [1, 2]\n",
        "timeout: abc\n",
        "timeout: 0\n",
        "timeout: true\n",
        "- a list\n",
        "top_count: [\n",
    ])
    def test_invalid_settings_file(self, tmp_path, content):
        path = write_settings(tmp_path, content)
        with pytest.raises(ConfigError):
            load_settings(path, environ=ENVIRON)

    def test_numeric_timeout_from_file(self, tmp_path):
        path = write_settings(tmp_path, "timeout: 5\n")
        assert load_settings(path, environ=ENVIRON).timeout == 5

    def test_missing_settings_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(str(tmp_path / "absent.yaml"), environ=ENVIRON)
