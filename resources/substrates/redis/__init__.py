"""Redis substrate modules backing the shared resolution cache."""

from resources.substrates.redis.component import MANIFEST, RESOURCE_COMPONENT_ID
from resources.substrates.redis.config import RedisSettings, resolve_redis_settings
from resources.substrates.redis.redis_substrate import RedisClientSubstrate
from resources.substrates.redis.substrate import RedisHealthStatus, RedisSubstrate

__all__ = [
    "MANIFEST",
    "RESOURCE_COMPONENT_ID",
    "RedisClientSubstrate",
    "RedisHealthStatus",
    "RedisSettings",
    "RedisSubstrate",
    "resolve_redis_settings",
]
