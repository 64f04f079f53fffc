"""Listado de funciones Lambda y metadata descriptiva para los eventos."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import RemoteQueryError

logger = logging.getLogger(__name__)

# Configuration de get_function -> campo del documento
METADATA_FIELDS = {
    "Description": "description",
    "LastModified": "last-modified",
    "MemorySize": "memory-size",
    "Runtime": "runtime",
    "CodeSize": "code-size",
    "Handler": "handler",
    "Timeout": "timeout",
    "Version": "version",
}


def list_all_functions(lambda_client: Any) -> List[str]:
    """Todas las funciones Lambda de la región, siguiendo la paginación.

    Raises:
        RemoteQueryError: si falla cualquier página
    """
    names: List[str] = []
    try:
        paginator = lambda_client.get_paginator("list_functions")
        for page in paginator.paginate():
            names.extend(fn["FunctionName"] for fn in page.get("Functions", []))
    except (ClientError, BotoCoreError) as e:
        raise RemoteQueryError("*", "list_functions", str(e)) from e
    return names


def render_metadata(configuration: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        field: configuration.get(key)
        for key, field in METADATA_FIELDS.items()
    }


class FunctionMetadataLookup:
    """Obtiene la Configuration de cada función una vez, al arrancar."""

    def __init__(self, lambda_client: Any):
        self._client = lambda_client

    def fetch(self, function_name: str) -> Dict[str, Any]:
        try:
            data = self._client.get_function(FunctionName=function_name)
        except (ClientError, BotoCoreError) as e:
            raise RemoteQueryError(function_name, "get_function", str(e)) from e
        return render_metadata(data.get("Configuration", {}))

    def fetch_all(self, function_names: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        metadata = {name: self.fetch(name) for name in function_names}
        logger.info("[LAMBDA] metadata loaded functions=%d", len(metadata))
        return metadata
