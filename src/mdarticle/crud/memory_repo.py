from dataclasses import dataclass, field

from mdarticle.crud.repo import DEFAULT_CATEGORY, CategoryRepo


@dataclass
class MemoryCategoryRepo(CategoryRepo):
    _ids: dict[str, int] = field(default_factory=dict)
    counts: dict[int, int] = field(default_factory=dict)

    def _create(self, name: str) -> int:
        cid = len(self._ids) + 1
        self._ids[name] = cid
        self.counts[cid] = 0
        return cid

    def resolve_or_create(self, name: str) -> int:
        cid = self._ids.get(name) or self._create(name)
        self.counts[cid] += 1
        return cid

    def use_default(self) -> int:
        cid = next(iter(self._ids.values()), None) or self._create(DEFAULT_CATEGORY)
        self.counts[cid] += 1
        return cid
