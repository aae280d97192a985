import json
from typing import Any, Optional


class BaseCache:
    """Interface shared by the cache backends; values travel as JSON text."""

    @staticmethod
    def dumps(value: Any) -> str:
        return json.dumps(value, default=str)

    @staticmethod
    def loads(payload: Optional[str]) -> Optional[Any]:
        if payload is None:
            return None
        return json.loads(payload)

    async def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    async def set(self, key: str, value: Any, expire: int = 300) -> bool:
        raise NotImplementedError

    async def delete(self, key: str) -> bool:
        raise NotImplementedError

    async def delete_pattern(self, pattern: str) -> int:
        raise NotImplementedError

    async def exists(self, key: str) -> bool:
        raise NotImplementedError

    async def close(self) -> None:
        return None
