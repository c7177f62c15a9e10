"""Event storage configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EventStorageConfiguration(BaseSettings):
    """Where the event storage keeps its documents.

    Events and version counters live in two sub-collections below one base
    document, ``<base_collection_name>/<base_document_id>``. Several
    independent logs can share a database by using different base
    documents.

    All settings can be configured via environment variables with the
    INTERLOG_ prefix. For example:
    - INTERLOG_BASE_COLLECTION_NAME=event-store
    - INTERLOG_BASE_DOCUMENT_ID=billing

    Attributes:
        base_collection_name: Collection holding the base document.
        base_document_id: Identifier of the base document.
        events_collection_name: Sub-collection holding one document per event.
        streams_collection_name: Sub-collection holding the version counters.

    Example:
        >>> config = EventStorageConfiguration(base_document_id="billing")
        >>> storage = DocumentEventStorage(backend, config)
    """

    base_collection_name: str = Field(default="event-store", min_length=1)
    base_document_id: str = Field(default="default", min_length=1)
    events_collection_name: str = Field(default="events", min_length=1)
    streams_collection_name: str = Field(default="streams", min_length=1)

    model_config = SettingsConfigDict(env_prefix="INTERLOG_")
