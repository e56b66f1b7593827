"""
db/container.py
---------------
Throwaway PostgreSQL server in Docker.
Starts the configured image with a random host port, waits until the
server accepts connections, and removes the container when stopped.
"""

import time

import docker
import psycopg2

from config import CONTAINER_STARTUP_TIMEOUT_SECONDS, POSTGRES_IMAGE
from db.connection import ConnectionInfo
from utils.logger import get_logger

logger = get_logger(__name__)

_USER = "test"
_PASSWORD = "test"
_DATABASE = "test"


class PostgresContainer:
    """A PostgreSQL server running in a disposable Docker container."""

    def __init__(self, image: str = POSTGRES_IMAGE, client=None):
        self.image = image
        self._client = client
        self._container = None
        self.info: ConnectionInfo | None = None

    def start(self, timeout: float = CONTAINER_STARTUP_TIMEOUT_SECONDS) -> ConnectionInfo:
        """
        Run the container and block until PostgreSQL is ready.

        Returns:
            Connection settings for the new server.

        Raises:
            docker.errors.DockerException: If the Docker daemon is unavailable.
            TimeoutError: If the server does not come up within `timeout` seconds.
        """
        if self._client is None:
            self._client = docker.from_env()
        logger.info(f"Starting {self.image} container...")
        self._container = self._client.containers.run(
            self.image,
            detach=True,
            remove=True,
            environment={
                "POSTGRES_USER": _USER,
                "POSTGRES_PASSWORD": _PASSWORD,
                "POSTGRES_DB": _DATABASE,
            },
            ports={"5432/tcp": None},
        )
        self._container.reload()
        host_port = int(self._container.attrs["NetworkSettings"]["Ports"]["5432/tcp"][0]["HostPort"])
        self.info = ConnectionInfo("localhost", host_port, _USER, _PASSWORD, _DATABASE)
        self._wait_until_ready(timeout)
        logger.info(f"url: {self.info.dsn}, username: {self.info.user}, password: {self.info.password}")
        return self.info

    def _wait_until_ready(self, timeout: float) -> None:
        deadline = time.monotonic() + timeout
        while True:
            try:
                psycopg2.connect(self.info.dsn, connect_timeout=2).close()
                return
            except psycopg2.OperationalError as e:
                if time.monotonic() >= deadline:
                    self.stop()
                    raise TimeoutError(f"PostgreSQL did not accept connections within {timeout}s") from e
                time.sleep(0.5)

    def stop(self) -> None:
        """Stop (and thereby remove) the container, if it is running."""
        if self._container is None:
            return
        self._container.stop()
        self._container = None
        logger.info("PostgreSQL container stopped.")

    def __enter__(self) -> ConnectionInfo:
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
