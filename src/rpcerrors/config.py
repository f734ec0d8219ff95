from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class GatewayConfig:
    """
    Configuration for the HTTP gateway that reports classified errors.

    Attributes:
        service_name: Name reported by the health endpoint and OpenAPI title.
        log_level: Numeric logging level for the gateway loggers.
        request_id_header: Header carrying the request correlation id.
    """
    service_name: str = "rpc-errors-gateway"
    log_level: int = logging.INFO
    request_id_header: str = "X-Request-ID"


def _parse_log_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level {raw!r}.")
    return level


def load_gateway_config(prefix: str = "RPCERRORS_") -> GatewayConfig:
    """
    Load the gateway configuration from environment variables.

    Reads `<prefix>SERVICE_NAME`, `<prefix>LOG_LEVEL` and
    `<prefix>REQUEST_ID_HEADER`; unset or empty variables keep the defaults.

    Raises:
        ConfigError: If a variable is set to an invalid value.
    """
    load_dotenv(find_dotenv(usecwd=True))
    defaults = GatewayConfig()

    service_name = os.getenv(f"{prefix}SERVICE_NAME") or defaults.service_name

    raw_level = os.getenv(f"{prefix}LOG_LEVEL")
    log_level = _parse_log_level(raw_level) if raw_level else defaults.log_level

    header = os.getenv(f"{prefix}REQUEST_ID_HEADER") or defaults.request_id_header
    if any(ch.isspace() for ch in header):
        raise ConfigError(f"Invalid request id header name {header!r}.")

    return GatewayConfig(
        service_name=service_name,
        log_level=log_level,
        request_id_header=header,
    )
