"""
Transcribe Proxy Configuration
Supports AWS Parameter Store for the production temp bucket
"""
import logging
import os
from functools import lru_cache

import boto3

logger = logging.getLogger(__name__)


def get_parameter(name: str, default: str = "") -> str:
    """Get parameter from AWS Parameter Store or environment"""
    # Environment variable takes precedence
    env_key = name.upper().replace("-", "_").replace("/", "_")
    if env_key in os.environ:
        return os.environ[env_key]

    if os.environ.get("USE_PARAMETER_STORE"):
        try:
            ssm = boto3.client("ssm", region_name=os.environ.get("AWS_REGION") or None)
            path = os.environ.get("PARAMETER_STORE_PATH", "/transcribe-proxy/prod/")
            response = ssm.get_parameter(Name=f"{path}{name}", WithDecryption=True)
            return response["Parameter"]["Value"]
        except Exception as e:
            logger.warning("Could not load %s from Parameter Store: %s", name, e)
            return default

    return default


class Config:
    """Base configuration"""
    # Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")
    JSON_SORT_KEYS = False

    # AWS
    AWS_REGION = os.environ.get("AWS_REGION", "")
    TEMP_BUCKET = os.environ.get("TEMP_BUCKET", "")

    # Transcription
    JOB_NAME_PREFIX = os.environ.get("JOB_NAME_PREFIX", "opic")
    TEMP_KEY_PREFIX = "temp/"
    MEDIA_FORMAT = "webm"
    AUDIO_CONTENT_TYPE = "audio/webm"
    DEFAULT_LANGUAGE_CODE = os.environ.get("DEFAULT_LANGUAGE_CODE", "en-US")
    RESULT_FETCH_TIMEOUT = float(os.environ.get("RESULT_FETCH_TIMEOUT", "10"))

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # App Version
    APP_VERSION = os.environ.get("APP_VERSION", "2026.10")
    BUILD_TIME = os.environ.get("BUILD_TIME", "")
    GIT_COMMIT = os.environ.get("GIT_COMMIT", "")


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Override with Parameter Store in production
    TEMP_BUCKET = get_parameter("temp-bucket", Config.TEMP_BUCKET)


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    TEMP_BUCKET = "test-temp-bucket"
    AWS_REGION = "us-east-1"


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}


@lru_cache()
def get_config(env: str = None):
    """Get configuration by environment name"""
    env = env or os.environ.get("FLASK_ENV", "development")
    return config.get(env, DevelopmentConfig)
