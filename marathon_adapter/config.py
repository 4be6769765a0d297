import logging
import os
from typing import Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError


_logger = logging.getLogger("marathon.config")


class Settings:
    """Client settings from the environment, then SSM under MARATHON_SSM_PREFIX."""

    def __init__(self) -> None:
        self.ssm_prefix = os.getenv("MARATHON_SSM_PREFIX", "").rstrip("/")
        self.base_url = self._get("url", "MARATHON_URL", "http://127.0.0.1:8080", str)
        self.api_prefix = self._get("api_prefix", "MARATHON_API_PREFIX", "/v2", str)
        self.request_timeout_seconds = self._get("timeout_seconds", "MARATHON_TIMEOUT_SECONDS", 10.0, float)
        self.header_name = self._get("header_name", "MARATHON_HEADER_NAME", "", str)
        self.header_value = self._resolve_secret(self._get("header_value", "MARATHON_HEADER_VALUE", "", str))
        self.log_level = str(self._get("log_level", "MARATHON_LOG_LEVEL", "INFO", str)).upper()

    def _get(self, ssm_key: str, env_key: str, default, parser: Callable) -> Optional[object]:
        if env_key in os.environ:
            try:
                return parser(os.environ[env_key])
            except ValueError:
                return default
        if self.ssm_prefix:
            value = self._read_ssm(f"{self.ssm_prefix}/{ssm_key}")
            if value is not None:
                try:
                    return parser(value)
                except ValueError:
                    return default
        return default

    def _read_ssm(self, name: str) -> Optional[str]:
        try:
            client = boto3.client("ssm")
            response = client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") != "ParameterNotFound":
                _logger.warning("config.ssm name=%s error=%s", name, exc)
            return None
        except BotoCoreError as exc:
            _logger.warning("config.ssm name=%s error=%s", name, exc)
            return None
        return response.get("Parameter", {}).get("Value")

    def _resolve_secret(self, value: Optional[str]) -> Optional[str]:
        if not isinstance(value, str):
            return value
        if not value.startswith("arn:aws:secretsmanager:"):
            return value
        try:
            client = boto3.client("secretsmanager")
            response = client.get_secret_value(SecretId=value)
        except (BotoCoreError, ClientError) as exc:
            _logger.warning("config.secret resolution failed error=%s", exc)
            return value
        return response.get("SecretString", value)
