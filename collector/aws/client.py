"""Factory de clientes boto3."""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)

_RETRY_CONFIG = Config(retries={"max_attempts": 3, "mode": "standard"})


def create_client(service: str, region: str, session: Optional[boto3.session.Session] = None) -> Any:
    """Crea un cliente boto3 para ``service`` en ``region``.

    Las credenciales salen de la cadena estándar de boto3 (env, perfil, rol).
    """
    session = session or boto3.session.Session()
    logger.debug("[AWS] client service=%s region=%s", service, region)
    return session.client(service, region_name=region, config=_RETRY_CONFIG)
