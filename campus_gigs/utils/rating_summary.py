# campus_gigs/utils/rating_summary.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, Tuple


def summarize_scores(scores: Sequence[int]) -> Tuple[float, int]:
    """
    回傳 (平均分數, 評價數)。平均四捨五入到小數第一位 (4.25 -> 4.3)；
    沒有評價時平均為 0。
    """
    count = len(scores)
    if count == 0:
        return 0, 0
    mean = Decimal(sum(scores)) / Decimal(count)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)), count
