import logging
from decimal import Decimal
from typing import Dict, Hashable, Optional

logger = logging.getLogger(__name__)


class BalanceCache:
    """
    Aggregated balances keyed by group id.

    Entries are never refreshed in place; any change to a group's expenses
    or shares must call invalidate(group_id). Every invalidation bumps the
    group's generation, and a put() made with an older generation is
    ignored, so a reader that loaded the ledger before a write cannot store
    what it saw after the write invalidated the group.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._entries: Dict[int, Dict[Hashable, Decimal]] = {}
        self._generations: Dict[int, int] = {}

    def generation(self, group_id: int) -> int:
        return self._generations.get(group_id, 0)

    def get(self, group_id: int) -> Optional[Dict[Hashable, Decimal]]:
        if not self.enabled:
            return None
        cached = self._entries.get(group_id)
        if cached is not None:
            logger.debug("Balance cache hit for group %s", group_id)
            return dict(cached)
        return None

    def put(
        self,
        group_id: int,
        balances: Dict[Hashable, Decimal],
        generation: Optional[int] = None,
    ) -> bool:
        if not self.enabled:
            return False

        if generation is not None and generation != self.generation(group_id):
            logger.debug(
                "Dropped stale balances for group %s (generation %s, now %s)",
                group_id,
                generation,
                self.generation(group_id),
            )
            return False

        self._entries[group_id] = dict(balances)
        return True

    def invalidate(self, group_id: int) -> None:
        self._generations[group_id] = self.generation(group_id) + 1
        if self._entries.pop(group_id, None) is not None:
            logger.debug("Balance cache invalidated for group %s", group_id)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, group_id: int) -> bool:
        return group_id in self._entries
