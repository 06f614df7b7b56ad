"""
Factory for creating embedding clients from settings
"""

import logging
from typing import List, Optional, Sequence, Type

from core.config import Settings, settings as default_settings
from core.exceptions import ConfigurationError
from domain.rag.embedding.base import BaseEmbeddingClient
from domain.rag.embedding.client import (
    JinaEmbeddingClient,
    OpenAIEmbeddingClient,
    VoyageEmbeddingClient,
)

logger = logging.getLogger(__name__)

# Settings prefix -> client class, in report order
PROVIDERS: List[tuple] = [
    ("openai", OpenAIEmbeddingClient),
    ("voyage", VoyageEmbeddingClient),
    ("jina", JinaEmbeddingClient),
]

ENV_VARS = ", ".join(f"{prefix.upper()}_API_KEY" for prefix, _ in PROVIDERS)


def _client_for(prefix: str, client_cls: Type[BaseEmbeddingClient], config: Settings) -> BaseEmbeddingClient:
    return client_cls(
        api_key=getattr(config, f"{prefix}_api_key"),
        api_url=getattr(config, f"{prefix}_api_url"),
        model=getattr(config, f"{prefix}_model"),
        timeout=config.embedding_timeout,
    )


def create_embedding_clients(
    config: Optional[Settings] = None,
    providers: Optional[Sequence[str]] = None,
) -> List[BaseEmbeddingClient]:
    """
    Create one client per provider that has credentials configured.
    
    Args:
        config: Settings to read credentials from (defaults to the global settings)
        providers: Optional provider names to restrict the run to (e.g. ["openai"])
        
    Returns:
        List of clients in fixed report order
        
    Raises:
        ConfigurationError: Unknown provider name, or no provider has a key
    """
    config = config or default_settings
    known = {prefix for prefix, _ in PROVIDERS}
    wanted = None
    if providers:
        wanted = {p.lower() for p in providers}
        unknown = wanted - known
        if unknown:
            raise ConfigurationError(
                f"Unknown provider(s): {', '.join(sorted(unknown))}. "
                f"Choose from: {', '.join(p for p, _ in PROVIDERS)}"
            )

    clients = []
    for prefix, client_cls in PROVIDERS:
        if wanted is not None and prefix not in wanted:
            continue
        if not getattr(config, f"{prefix}_api_key"):
            logger.info(f"Skipping {client_cls.provider}: {prefix.upper()}_API_KEY not set")
            continue
        clients.append(_client_for(prefix, client_cls, config))

    if not clients:
        raise ConfigurationError(f"Set at least one of {ENV_VARS}")
    return clients
