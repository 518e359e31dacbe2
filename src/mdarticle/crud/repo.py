"""Category resolution contract consumed by the import pipeline"""

from abc import ABC, abstractmethod


DEFAULT_CATEGORY = 'default'


class CategoryRepo(ABC):
    @abstractmethod
    def resolve_or_create(self, name: str) -> int:
        """Return the id of the named category, creating it if needed. Records one use."""
        raise NotImplementedError

    @abstractmethod
    def use_default(self) -> int:
        """Return the default category id and record one use of it."""
        raise NotImplementedError
