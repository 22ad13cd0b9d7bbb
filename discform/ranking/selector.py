"""Capacity-bounded ranking of a fixed item set.

A selector partitions its items into an ordered ``ranked`` list (at most
``max_rank`` long) and an ``unranked`` remainder. Every input modality
(click, drag, keyboard) maps onto promote, demote, reorder and submit.
"""

from collections.abc import Sequence

from discform.catalog.models import Item


class RankValidationError(Exception):
    """Raised when a ranking operation is not allowed in the current state.

    The selector is left unchanged; the caller may retry.
    """

    pass


class RankSelector:
    """Interactive top-K ranking over a fixed list of items.

    Position in ``ranked`` is the rank: index 0 is rank 1, the most
    characteristic or most important item.
    """

    def __init__(self, items: Sequence[Item], max_rank: int) -> None:
        """Initialize with every item unranked.

        Args:
            items: The group's items, in catalog order.
            max_rank: How many items must be ranked before submitting.

        Raises:
            ValueError: If there are fewer items than ``max_rank`` or item
                texts repeat.
        """
        if max_rank < 1:
            raise ValueError(f"max_rank must be positive, got {max_rank}")
        if len(items) < max_rank:
            raise ValueError(
                f"Need at least {max_rank} items to rank, got {len(items)}"
            )
        texts = [item.text for item in items]
        if len(set(texts)) != len(texts):
            raise ValueError("Item texts must be unique within a group")

        self.items: tuple[Item, ...] = tuple(items)
        self.max_rank = max_rank
        self._order = {item.text: i for i, item in enumerate(self.items)}
        self._ranked: list[Item] = []
        self._unranked: list[Item] = list(self.items)

    @property
    def ranked(self) -> tuple[Item, ...]:
        """Ranked items, most preferred first."""
        return tuple(self._ranked)

    @property
    def unranked(self) -> tuple[Item, ...]:
        """Items not yet ranked, in catalog order."""
        return tuple(self._unranked)

    @property
    def is_complete(self) -> bool:
        """Whether exactly ``max_rank`` items are ranked."""
        return len(self._ranked) == self.max_rank

    def rank_of(self, item: Item | str) -> int | None:
        """Current rank of an item (1-based), or None when unranked."""
        resolved = self._resolve(item)
        if resolved in self._ranked:
            return self._ranked.index(resolved) + 1
        return None

    def promote(self, item: Item | str) -> None:
        """Append an unranked item to the end of ``ranked``.

        Raises:
            RankValidationError: If the item is already ranked or ``ranked``
                is full.
        """
        resolved = self._resolve(item)
        if resolved in self._ranked:
            raise RankValidationError(f"{resolved.text!r} is already ranked")
        if len(self._ranked) >= self.max_rank:
            raise RankValidationError(
                f"Cannot rank more than {self.max_rank} items"
            )
        self._unranked.remove(resolved)
        self._ranked.append(resolved)

    def demote(self, item: Item | str) -> None:
        """Move a ranked item back to ``unranked``; later ranks move up.

        Raises:
            RankValidationError: If the item is not ranked.
        """
        resolved = self._resolve(item)
        if resolved not in self._ranked:
            raise RankValidationError(f"{resolved.text!r} is not ranked")
        self._ranked.remove(resolved)
        self._return_to_unranked(resolved)

    def toggle(self, item: Item | str) -> None:
        """Demote a ranked item, promote an unranked one."""
        resolved = self._resolve(item)
        if resolved in self._ranked:
            self.demote(resolved)
        else:
            self.promote(resolved)

    def reorder(self, item: Item | str, target_position: int) -> Item | None:
        """Move an item to a position in ``ranked``.

        A ranked item is moved within ``ranked``. An unranked item is
        inserted at the target position; if that overflows ``max_rank``,
        the item in the last ranked position is demoted.

        Args:
            item: The item to move.
            target_position: 0-based index of a currently ranked slot.

        Returns:
            The evicted item, if the move displaced one.

        Raises:
            RankValidationError: If the target is not a ranked position.
        """
        resolved = self._resolve(item)
        if not 0 <= target_position < len(self._ranked):
            raise RankValidationError(
                f"Target position {target_position} is not a ranked position "
                f"(0..{len(self._ranked) - 1})"
            )

        if resolved in self._ranked:
            self._ranked.remove(resolved)
            self._ranked.insert(target_position, resolved)
            return None

        self._unranked.remove(resolved)
        self._ranked.insert(target_position, resolved)
        if len(self._ranked) <= self.max_rank:
            return None
        evicted = self._ranked.pop()
        self._return_to_unranked(evicted)
        return evicted

    def clear(self) -> None:
        """Unrank every item."""
        self._ranked = []
        self._unranked = list(self.items)

    def submit(self) -> dict[str, int]:
        """Emit the ranking as ``{item text: rank}``, rank 1 first.

        Raises:
            RankValidationError: If fewer than ``max_rank`` items are ranked.
        """
        if not self.is_complete:
            raise RankValidationError(
                f"Rank {self.max_rank} items before submitting "
                f"({len(self._ranked)} ranked)"
            )
        return {item.text: position + 1 for position, item in enumerate(self._ranked)}

    def _resolve(self, item: Item | str) -> Item:
        text = item if isinstance(item, str) else item.text
        index = self._order.get(text)
        if index is None:
            raise RankValidationError(f"Unknown item: {text!r}")
        return self.items[index]

    def _return_to_unranked(self, item: Item) -> None:
        self._unranked.append(item)
        self._unranked.sort(key=lambda i: self._order[i.text])
