"""Tests for config schema and loading."""

import json

from mediakeeper.config.loader import (
    camel_to_snake,
    convert_keys,
    load_config,
    save_config,
    snake_to_camel,
)
from mediakeeper.config.schema import Config


class TestKeyConversion:
    def test_camel_to_snake(self):
        assert camel_to_snake("messageThreadId") == "message_thread_id"
        assert camel_to_snake("port") == "port"

    def test_snake_to_camel(self):
        assert snake_to_camel("ttl_seconds") == "ttlSeconds"

    def test_convert_nested(self):
        data = {"telegram": {"channelId": "1"}, "items": [{"bucketName": "b"}]}
        assert convert_keys(data) == {
            "telegram": {"channel_id": "1"},
            "items": [{"bucket_name": "b"}],
        }


class TestDefaults:
    def test_fail_closed_defaults(self):
        config = Config()
        assert config.telegram.channel_id == ""
        assert config.telegram.message_thread_id is None
        assert config.dedup.enabled is False
        assert config.dedup.ttl_seconds == 86400
        assert config.poll.interval_s == 5.0
        assert config.poll.limit == 100

    def test_webhook_url(self):
        config = Config()
        assert config.webhook_url is None

        config.webhook.public_url = "https://archive.example.com/"
        assert config.webhook_url == "https://archive.example.com/telegram/webhook"


class TestLoadConfig:
    def test_load_camel_case_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "telegram": {"channelId": "-1001234567890", "messageThreadId": "42"},
            "storage": {"bucketName": "media", "accountId": "abc"},
            "dedup": {"enabled": True, "ttlSeconds": 60},
        }))

        config = load_config(path)

        assert config.telegram.channel_id == "-1001234567890"
        assert config.telegram.message_thread_id == "42"
        assert config.storage.bucket_name == "media"
        assert config.storage.account_id == "abc"
        assert config.dedup.enabled is True
        assert config.dedup.ttl_seconds == 60

    def test_numeric_chat_ids(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "telegram": {"channelId": -1001234567890, "messageThreadId": 42},
            "storage": {"bucketName": "media-archive"},
        }))

        config = load_config(path)

        assert config.telegram.channel_id == "-1001234567890"
        assert config.telegram.message_thread_id == "42"
        assert config.storage.bucket_name == "media-archive"

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.json").telegram.channel_id == ""

    def test_malformed_file_returns_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{oops")
        assert load_config(path).storage.bucket_name == ""

    def test_environment_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MEDIAKEEPER_TELEGRAM__CHANNEL_ID", "-100777")
        config = load_config(tmp_path / "missing.json")
        assert config.telegram.channel_id == "-100777"

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        config = Config()
        config.telegram.channel_id = "-100"
        config.webhook.port = 9000

        save_config(config, path)

        raw = json.loads(path.read_text())
        assert raw["telegram"]["channelId"] == "-100"
        assert load_config(path).webhook.port == 9000
