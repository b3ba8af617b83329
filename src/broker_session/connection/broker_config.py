"""Connection target and credentials for a broker session."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import pika
from pika.connection import Parameters

DEFAULT_VIRTUAL_HOST = "/"
DEFAULT_FRAME_MAX = 131072
RABBITMQ_URL_ENV = "RABBITMQ_URL"


@dataclass(frozen=True)
class BrokerConfig:
    """Everything needed to open and authenticate one broker connection.

    Login always uses SASL PLAIN. ``heartbeat=0`` disables heartbeats, matching
    the single-threaded blocking model where nothing runs between calls.
    """

    host: str = "localhost"
    port: int = 5672
    username: str = "guest"
    password: str = "guest"
    virtual_host: str = DEFAULT_VIRTUAL_HOST
    frame_max: int = DEFAULT_FRAME_MAX
    heartbeat: int = 0
    connection_attempts: int = 1
    socket_timeout: Optional[float] = 10.0

    @classmethod
    def from_url(cls, rabbitmq_url: str) -> BrokerConfig:
        url = rabbitmq_url.strip()
        try:
            parameters: Parameters = pika.URLParameters(url)
        except ValueError as exc:
            raise ValueError(f"Invalid RabbitMQ URL provided: {url}") from exc

        heartbeat = parameters.heartbeat if isinstance(parameters.heartbeat, int) else 0
        return cls(
            host=parameters.host,
            port=parameters.port,
            username=parameters.credentials.username,
            password=parameters.credentials.password,
            virtual_host=parameters.virtual_host,
            frame_max=parameters.frame_max,
            heartbeat=heartbeat,
            connection_attempts=parameters.connection_attempts,
            socket_timeout=parameters.socket_timeout,
        )

    @classmethod
    def from_env(cls, rabbitmq_url: Optional[str] = None) -> BrokerConfig:
        url = (rabbitmq_url or os.getenv(RABBITMQ_URL_ENV) or "").strip()
        if not url:
            raise ValueError(
                "RabbitMQ URL must be provided via argument or RABBITMQ_URL environment variable."
            )
        return cls.from_url(url)

    def to_parameters(self) -> pika.ConnectionParameters:
        """Build the codec's connection parameters."""
        return pika.ConnectionParameters(
            host=self.host,
            port=self.port,
            virtual_host=self.virtual_host,
            credentials=pika.PlainCredentials(self.username, self.password),
            frame_max=self.frame_max,
            heartbeat=self.heartbeat,
            connection_attempts=self.connection_attempts,
            socket_timeout=self.socket_timeout,
        )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"
