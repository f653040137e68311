from typing import Dict, Iterable, Optional

from flask import current_app

from apihub.domain.errors import NotFound
from .base import SourceConnector

EXTENSION_KEY = "apihub.connectors"


class ConnectorRegistry:
    def __init__(self, connectors: Iterable[SourceConnector] = ()):
        self._connectors: Dict[str, SourceConnector] = {}
        for connector in connectors:
            self.register(connector)

    def register(self, connector: SourceConnector) -> None:
        if not connector.type:
            raise ValueError("Connectors must declare a type")
        self._connectors[connector.type.lower()] = connector

    def for_type(self, connector_type: str) -> SourceConnector:
        connector = self._connectors.get((connector_type or "").lower())
        if connector is None:
            raise NotFound(f"No source connector for type {connector_type!r}")
        return connector

    def for_url(self, url: str) -> Optional[SourceConnector]:
        """The connector that owns ``url``, or None for a plain URL."""
        for connector in self._connectors.values():
            if connector.accepts(url):
                return connector
        return None


def connector_registry() -> ConnectorRegistry:
    return current_app.extensions[EXTENSION_KEY]
