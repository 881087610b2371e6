"""
Key/value store abstraction for per-document state
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Generic, List, Optional, TypeVar

V = TypeVar("V")


class KeyValueStore(ABC, Generic[V]):
    """Volatile or persistent mapping from identifier to state"""

    @abstractmethod
    def get(self, key: str) -> Optional[V]:
        pass

    @abstractmethod
    def set(self, key: str, value: V) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a key; returns whether it was present"""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        pass

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def values(self) -> List[V]:
        result = []
        for key in self.keys():
            value = self.get(key)
            if value is not None:
                result.append(value)
        return result


class MemoryStore(KeyValueStore[V]):
    """In-process store; contents live as long as the process"""

    def __init__(self):
        self._data: Dict[str, V] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
