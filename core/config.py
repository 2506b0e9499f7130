"""
==========================================
Configuration management for the CRUD layer.
==========================================

Loads all connection settings from environment variables (.env file) and
provides a centralized, read-only Config instance used as the default source
of connection descriptors.

The configuration system ensures:
- Single source of truth for every backend's connection parameters
- Type conversion of ports and timeouts
- A `default` backend key selecting the active driver
- Per-call overrides through immutable copies (never in-place mutation)

Example:
    >>> from core.config import config
    >>>
    >>> # Active backend and its parameters
    >>> print(config.default_backend)
    >>> params = config.get_connection_params()
    >>>
    >>> # SQLAlchemy URL for health checks
    >>> url = config.get_connection_url('postgresql')
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

from core.exceptions import ConfigurationError

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

# SQLAlchemy driver names for each supported backend
SQLALCHEMY_DRIVERS = {
    'mysql': 'mysql+pymysql',
    'postgresql': 'postgresql+psycopg2',
    'sqlite': 'sqlite',
}


def _optional_int(value: Optional[str]) -> Optional[int]:
    return int(value) if value not in (None, '') else None


def _optional_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value not in (None, '') else None


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection parameters for a single backend.

    Attributes:
        host: Database server hostname or IP address
        port: Database server port number
        user: Database username
        password: Database password
        database: Database name (file path for SQLite)
        socket: Optional unix socket path
        connect_timeout: Seconds to wait while connecting
        read_timeout: Socket read timeout in seconds (MySQL only)
    """

    host: str = 'localhost'
    port: Optional[int] = None
    user: str = ''
    password: str = ''
    database: str = ''
    socket: Optional[str] = None
    connect_timeout: Optional[float] = None
    read_timeout: Optional[float] = None

    def get_connection_url(self, backend: str) -> URL:
        """Get a SQLAlchemy URL for this connection.

        Args:
            backend: Backend name (mysql, postgresql, sqlite)

        Returns:
            SQLAlchemy URL object

        Raises:
            ConfigurationError: If the backend has no SQLAlchemy driver mapping
        """
        if backend not in SQLALCHEMY_DRIVERS:
            raise ConfigurationError(f"No SQLAlchemy driver known for backend '{backend}'")

        if backend == 'sqlite':
            return URL.create(drivername='sqlite', database=self.database or None)

        query = {'unix_socket': self.socket} if backend == 'mysql' and self.socket else {}
        return URL.create(
            drivername=SQLALCHEMY_DRIVERS[backend],
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=self.port,
            database=self.database or None,
            query=query
        )

    def get_connection_params(self) -> dict:
        """Get connection parameters as dictionary.

        Returns:
            Dictionary with keys: host, port, user, password, database, socket
        """
        return {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': self.database,
            'socket': self.socket
        }


@dataclass(frozen=True)
class DatabaseConfig:
    """Config descriptor: the active backend plus every backend's parameters.

    Attributes:
        default: Name of the active backend (key into connections)
        connections: Mapping of backend name to ConnectionConfig
    """

    default: str
    connections: Mapping[str, ConnectionConfig] = field(default_factory=dict)

    def connection(self, backend: Optional[str] = None) -> ConnectionConfig:
        """Get the ConnectionConfig for a backend.

        Args:
            backend: Backend name, defaults to the configured default

        Returns:
            ConnectionConfig for that backend

        Raises:
            ConfigurationError: If no connection is configured under that name
        """
        name = backend or self.default
        try:
            return self.connections[name]
        except KeyError:
            raise ConfigurationError(
                f"No connection configured for backend '{name}'. "
                f"Known backends: {', '.join(sorted(self.connections)) or 'none'}"
            ) from None

    def override(
        self,
        default: Optional[str] = None,
        **connection_overrides: ConnectionConfig
    ) -> 'DatabaseConfig':
        """Return a copy with a different default and/or replaced connections.

        Example:
            >>> local = config.database.override(default='sqlite')
        """
        connections: Dict[str, ConnectionConfig] = dict(self.connections)
        connections.update(connection_overrides)
        return replace(self, default=default or self.default, connections=connections)


class Config:
    """Centralized configuration manager.

    Provides access to all connection settings loaded from environment
    variables (.env file).

    Attributes:
        database: DatabaseConfig descriptor

    Properties:
        default_backend: Name of the active backend
        db_host: Active backend hostname
        db_port: Active backend port
        db_user: Active backend username
        db_name: Active backend database name

    Example:
        >>> config = Config()
        >>> print(f"Connecting to {config.db_host}:{config.db_port}")
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """Initialize configuration from environment variables.

        Args:
            environ: Optional mapping used instead of os.environ (tests)
        """
        env = os.environ if environ is None else environ
        connect_timeout = _optional_float(env.get('DB_CONNECT_TIMEOUT'))
        read_timeout = _optional_float(env.get('DB_READ_TIMEOUT'))

        self.database = DatabaseConfig(
            default=env.get('DB_CONNECTION', 'mysql'),
            connections={
                'mysql': ConnectionConfig(
                    host=env.get('MYSQL_HOST', 'localhost'),
                    port=int(env.get('MYSQL_PORT', '3306')),
                    user=env.get('MYSQL_USER', 'root'),
                    password=env.get('MYSQL_PASSWORD', ''),
                    database=env.get('MYSQL_DATABASE', ''),
                    socket=env.get('MYSQL_SOCKET') or None,
                    connect_timeout=connect_timeout,
                    read_timeout=read_timeout
                ),
                'postgresql': ConnectionConfig(
                    host=env.get('POSTGRES_HOST', 'localhost'),
                    port=int(env.get('POSTGRES_PORT', '5432')),
                    user=env.get('POSTGRES_USER', 'postgres'),
                    password=env.get('POSTGRES_PASSWORD', ''),
                    database=env.get('POSTGRES_DB', 'postgres'),
                    socket=env.get('POSTGRES_SOCKET') or None,
                    connect_timeout=connect_timeout
                ),
                'sqlite': ConnectionConfig(
                    host='',
                    database=env.get('SQLITE_DATABASE', ':memory:'),
                    connect_timeout=connect_timeout
                ),
            }
        )

    @property
    def default_backend(self) -> str:
        """Get the active backend name."""
        return self.database.default

    @property
    def db_host(self) -> str:
        """Get active backend hostname."""
        return self.database.connection().host

    @property
    def db_port(self) -> Optional[int]:
        """Get active backend port number."""
        return self.database.connection().port

    @property
    def db_user(self) -> str:
        """Get active backend username."""
        return self.database.connection().user

    @property
    def db_name(self) -> str:
        """Get active backend database name."""
        return self.database.connection().database

    def get_connection_params(self, backend: Optional[str] = None) -> dict:
        """Get connection parameters for a backend.

        Args:
            backend: Backend name, defaults to the active backend

        Returns:
            Dictionary with keys: host, port, user, password, database, socket
        """
        return self.database.connection(backend).get_connection_params()

    def get_connection_url(self, backend: Optional[str] = None) -> URL:
        """Get a SQLAlchemy URL for a backend.

        Example:
            >>> url = config.get_connection_url('mysql')
            >>> engine = create_engine(url)
        """
        name = backend or self.default_backend
        return self.database.connection(name).get_connection_url(name)


# Global configuration instance
config = Config()
