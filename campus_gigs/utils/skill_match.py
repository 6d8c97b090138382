# campus_gigs/utils/skill_match.py
import Levenshtein
from typing import Iterable

from campus_gigs.core.config import settings


# (輔助函式) 取得兩個字串的 Levenshtein 相似度 (0.0 ~ 1.0)
def _get_string_similarity(s1: str, s2: str) -> float:
    # Levenshtein.distance 算出的是 "編輯距離" (差多少)
    # 將其標準化為 "相似度"，1.0 表示完全相同
    if not s1 or not s2:
        return 0.0
    distance = Levenshtein.distance(s1.lower(), s2.lower())
    max_len = max(len(s1), len(s2))
    return 1.0 - (distance / max_len)


def skill_matches(query: str, skills: Iterable[str], threshold: float | None = None) -> bool:
    """
    判斷技能列表中是否有任何一項符合查詢字串。

    比對順序：
    1. 不分大小寫的完全相同或子字串 (e.g. "react" 符合 "React Native")
    2. Levenshtein 相似度超過門檻 (e.g. "Pyhton" 符合 "Python")
    """
    query = (query or "").strip().lower()
    if not query:
        return True

    if threshold is None:
        threshold = settings.SKILL_MATCH_THRESHOLD

    for skill in skills or []:
        name = skill.strip().lower()
        if not name:
            continue
        if query == name or query in name:
            return True
        if _get_string_similarity(query, name) >= threshold:
            return True
    return False
