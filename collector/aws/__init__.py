"""Adaptadores AWS: CloudWatch (métricas) y Lambda (recursos y metadata)."""

from .client import create_client
from .cloudwatch import CloudWatchQueryClient
from .lambda_resources import FunctionMetadataLookup, list_all_functions

__all__ = [
    "CloudWatchQueryClient",
    "FunctionMetadataLookup",
    "create_client",
    "list_all_functions",
]
