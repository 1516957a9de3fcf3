"""Redis connection configuration."""

from pydantic import BaseModel


class RedisConfig(BaseModel, frozen=True):
    """Redis connection settings for the durable refresh token store."""

    url: str
    key_prefix: str = ""
