"""Connection management for MongoDB integration.

This module provides connection pooling and database access for MongoDB,
using PyMongo's MongoClient.
"""

from typing import Any

try:
    from pymongo import MongoClient
    from pymongo.database import Database
    from pymongo.errors import PyMongoError
except ImportError as err:
    raise ImportError(
        "pymongo package is required for MongoDB integration. "
        "Install it with: pip install interlog[mongodb]"
    ) from err

from .config import MongoDBConfig


class MongoDBConnectionManager:
    """Manages MongoDB database connections.

    This class handles connection pooling and database access for MongoDB
    operations. The client is created on first use and reused for the
    lifetime of the manager.

    Attributes:
        config: MongoDB configuration object
        client: MongoDB client instance (initialized on first use)

    Examples:
        >>> config = MongoDBConfig(
        ...     uri="mongodb://localhost:27017/?replicaSet=rs0",
        ...     database="myapp"
        ... )
        >>> manager = MongoDBConnectionManager(config)
        >>> db = manager.database
        >>> manager.close()

        >>> # Using context manager
        >>> with MongoDBConnectionManager(config) as manager:
        ...     manager.database["events"].find_one({})
    """

    def __init__(self, config: MongoDBConfig):
        """Initialize the connection manager.

        Args:
            config: MongoDB configuration object
        """
        self.config = config
        self._client: MongoClient | None = None

    @property
    def client(self) -> MongoClient:
        """Get or create the MongoDB client instance.

        Returns:
            MongoDB client instance
        """
        if self._client is None:
            kwargs: dict[str, Any] = {
                "maxPoolSize": self.config.max_pool_size,
                "minPoolSize": self.config.min_pool_size,
                "serverSelectionTimeoutMS": self.config.server_selection_timeout_ms,
                "connectTimeoutMS": self.config.connect_timeout_ms,
            }

            if self.config.max_idle_time_ms is not None:
                kwargs["maxIdleTimeMS"] = self.config.max_idle_time_ms

            if self.config.socket_timeout_ms is not None:
                kwargs["socketTimeoutMS"] = self.config.socket_timeout_ms

            kwargs.update(self.config.client_options)

            self._client = MongoClient(self.config.uri, **kwargs)
        return self._client

    @property
    def database(self) -> Database:
        """Get the configured database.

        Returns:
            MongoDB database instance
        """
        return self.client[self.config.database]

    def verify_connectivity(self) -> bool:
        """Verify that the database connection is working.

        Returns:
            True if connection is successful, False otherwise

        Examples:
            >>> if manager.verify_connectivity():
            ...     print("Connected to MongoDB")
        """
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError:
            return False

    def close(self) -> None:
        """Close the client and all connections."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "MongoDBConnectionManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Context manager exit - ensures client is closed."""
        self.close()
        return False
