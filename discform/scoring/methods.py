"""Point accumulation for forced-ranking responses."""

from collections.abc import Iterable, Sequence

from discform.core.models import RankRecord


def rank_points(rank: int, max_rank: int) -> int:
    """Points for a rank: (max_rank + 1) - rank, so rank 1 earns max_rank.

    Raises:
        ValueError: If rank is outside 1..max_rank.
    """
    if not 1 <= rank <= max_rank:
        raise ValueError(f"Rank {rank} outside 1..{max_rank}")
    return max_rank + 1 - rank


def sum_points(records: Iterable[RankRecord], factors: Sequence[str]) -> dict[str, int]:
    """Accumulate rank points into one bucket per factor.

    Every factor in ``factors`` gets a bucket, starting at 0.

    Raises:
        ValueError: If a record carries a factor outside ``factors``.
    """
    sums = {factor: 0 for factor in factors}
    for record in records:
        if record.item_factor not in sums:
            raise ValueError(f"Unexpected factor: {record.item_factor}")
        sums[record.item_factor] += rank_points(record.rank, record.stage.max_rank)
    return sums
