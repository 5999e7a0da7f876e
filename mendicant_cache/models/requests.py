from typing import Any
from pydantic import BaseModel


class CacheWriteRequest(BaseModel):
    """Body for writing a value into a cache namespace"""
    value: Any
