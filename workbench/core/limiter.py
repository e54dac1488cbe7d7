from slowapi import Limiter
from slowapi.util import get_remote_address

from workbench.core.settings import settings


def build_limiter(per_minute: int | None = None, *, storage_uri: str | None = None) -> Limiter:
    """Limiter keyed on the client address with one per-minute default limit."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{per_minute or settings.rate_limit_per_minute}/minute"],
        storage_uri=storage_uri or settings.rate_limit_storage_uri,
        enabled=settings.rate_limit_enabled,
    )


limiter = build_limiter()

__all__ = ["build_limiter", "limiter"]
