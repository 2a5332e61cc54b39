"""
Configuration Tests
"""
from unittest.mock import MagicMock, patch

import config as config_module
from config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config, get_parameter
from transcribe_proxy import create_app


class TestGetParameter:
    """Environment and Parameter Store lookup"""

    def test_environment_wins(self, monkeypatch):
        monkeypatch.setenv("TEMP_BUCKET", "env-bucket")
        monkeypatch.setenv("USE_PARAMETER_STORE", "1")
        with patch.object(config_module.boto3, "client") as boto_client:
            assert get_parameter("temp-bucket") == "env-bucket"
        boto_client.assert_not_called()

    def test_default_without_parameter_store(self, monkeypatch):
        monkeypatch.delenv("TEMP_BUCKET", raising=False)
        monkeypatch.delenv("USE_PARAMETER_STORE", raising=False)
        assert get_parameter("temp-bucket", "fallback") == "fallback"

    def test_reads_parameter_store(self, monkeypatch):
        monkeypatch.delenv("TEMP_BUCKET", raising=False)
        monkeypatch.setenv("USE_PARAMETER_STORE", "1")
        monkeypatch.setenv("PARAMETER_STORE_PATH", "/proxy/test/")
        ssm = MagicMock()
        ssm.get_parameter.return_value = {"Parameter": {"Value": "ssm-bucket"}}

        with patch.object(config_module.boto3, "client", return_value=ssm):
            assert get_parameter("temp-bucket") == "ssm-bucket"
        ssm.get_parameter.assert_called_once_with(Name="/proxy/test/temp-bucket", WithDecryption=True)

    def test_parameter_store_failure_falls_back(self, monkeypatch, caplog):
        monkeypatch.delenv("TEMP_BUCKET", raising=False)
        monkeypatch.setenv("USE_PARAMETER_STORE", "1")
        ssm = MagicMock()
        ssm.get_parameter.side_effect = RuntimeError("no credentials")

        with patch.object(config_module.boto3, "client", return_value=ssm):
            assert get_parameter("temp-bucket", "fallback") == "fallback"
        assert "Could not load temp-bucket from Parameter Store" in caplog.text


class TestConfigClasses:
    """Config selection"""

    def test_get_config(self):
        assert get_config("testing") is TestingConfig
        assert get_config("production") is ProductionConfig
        assert get_config("unknown") is DevelopmentConfig

    def test_fixed_media_settings(self):
        assert TestingConfig.MEDIA_FORMAT == "webm"
        assert TestingConfig.AUDIO_CONTENT_TYPE == "audio/webm"
        assert TestingConfig.TEMP_KEY_PREFIX == "temp/"

    def test_create_app_loads_config(self):
        app = create_app('testing')
        assert app.config['TESTING'] is True
        assert app.config['TEMP_BUCKET'] == 'test-temp-bucket'

    def test_healthz_degraded_without_bucket(self):
        app = create_app('testing')
        app.config['TEMP_BUCKET'] = ''
        data = app.test_client().get('/healthz').get_json()
        assert data['status'] == 'degraded'
        assert data['temp_bucket_configured'] is False
