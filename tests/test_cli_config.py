"""Tests for CLI configuration module."""

import json
import stat

from cli.config import Config
from common.constants import PROOF_CHUNK_SIZE_BYTES


def test_config_creates_default_file(tmp_path):
    config_path = tmp_path / '.proofvault' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()
    assert config.data['timeout'] == 30
    assert config.data['max_retries'] == 3
    assert config.data['retry_backoff_multiplier'] == 2
    assert config.get_chunk_size() == PROOF_CHUNK_SIZE_BYTES
    assert 'api_key' not in config.data


def test_config_loads_existing_file(tmp_path):
    config_path = tmp_path / '.proofvault' / 'config.json'
    config_path.parent.mkdir(parents=True)
    with open(config_path, 'w') as f:
        json.dump({'api_key': 'pv_test123', 'server_host': 'example.com', 'server_port': 9000}, f)

    config = Config(config_path)

    assert config.get_api_key() == 'pv_test123'
    assert config.get_base_url() == 'http://example.com:9000'
    assert config.data['timeout'] == 30


def test_config_save_and_get_api_key(temp_config):
    assert temp_config.get_api_key() is None

    temp_config.set_api_key('pv_abc', 'alice')

    reloaded = Config(temp_config.config_path)
    assert reloaded.get_api_key() == 'pv_abc'
    assert reloaded.get_identity() == 'alice'


def test_corrupt_config_falls_back_to_defaults(tmp_path):
    config_path = tmp_path / '.proofvault' / 'config.json'
    config_path.parent.mkdir(parents=True)
    config_path.write_text('{not json')

    config = Config(config_path)

    assert config.get_api_key() is None
    assert config_path.with_suffix('.json.bak').exists()


def test_retry_config(temp_config):
    assert temp_config.get_retry_config() == {'max_retries': 3, 'retry_backoff_multiplier': 2}


def test_environment_overrides_stored_server(tmp_path, monkeypatch):
    config_path = tmp_path / 'config.json'
    config_path.write_text(json.dumps({'server_host': 'example.com', 'server_port': 9000}))
    monkeypatch.setenv('PV_SERVER_HOST', 'vault.internal')
    monkeypatch.setenv('PV_SERVER_PORT', '8443')

    config = Config(config_path)

    assert config.get_base_url() == 'http://vault.internal:8443'
    assert config.data['server_host'] == 'example.com'


def test_saved_config_is_private(temp_config):
    temp_config.set_api_key('pv_secret', 'alice')

    mode = stat.S_IMODE(temp_config.config_path.stat().st_mode)
    assert mode == 0o600
    assert not temp_config.config_path.with_suffix('.json.tmp').exists()


def test_non_object_config_is_replaced(tmp_path):
    config_path = tmp_path / 'config.json'
    config_path.write_text('[1, 2, 3]')

    config = Config(config_path)

    assert config.get_timeout() == 30
    assert config_path.with_suffix('.json.bak').exists()
