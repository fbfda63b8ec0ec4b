"""Platform adapters for Meta chat integrations."""

from __future__ import annotations

from typing import Optional

from app.adapters.base import BasePlatformAdapter
from app.adapters.instagram import InstagramAdapter
from app.adapters.whatsapp import WhatsAppAdapter
from app.config import Settings, get_settings
from app.schemas.omnichannel import Platform

AdapterRegistry = dict[Platform, BasePlatformAdapter]


def build_adapter(platform: Platform, settings: Settings) -> BasePlatformAdapter:
    """Build an adapter with whatever credentials are configured (may be decode-only)."""
    if platform == Platform.WHATSAPP:
        return WhatsAppAdapter(
            access_token=settings.meta_access_token,
            phone_id=settings.whatsapp_phone_id,
            business_id=settings.whatsapp_business_id,
            api_url=settings.meta_graph_api_url,
            timeout=settings.meta_api_timeout_seconds,
        )
    return InstagramAdapter(
        access_token=settings.meta_access_token,
        account_id=settings.instagram_account_id,
        api_url=settings.meta_graph_api_url,
        timeout=settings.meta_api_timeout_seconds,
    )


def build_adapter_registry(settings: Optional[Settings] = None) -> AdapterRegistry:
    """Build adapter registry from config. Only credentialed adapters are included."""
    settings = settings or get_settings()
    registry: AdapterRegistry = {}
    for platform in Platform:
        adapter = build_adapter(platform, settings)
        if adapter.can_send:
            registry[platform] = adapter
    return registry


def get_adapter_registry() -> AdapterRegistry:
    """FastAPI dependency: credentialed adapters for the current settings."""
    return build_adapter_registry()


__all__ = [
    "AdapterRegistry",
    "BasePlatformAdapter",
    "InstagramAdapter",
    "WhatsAppAdapter",
    "build_adapter",
    "build_adapter_registry",
    "get_adapter_registry",
]
