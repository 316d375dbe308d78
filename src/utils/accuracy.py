"""Per-ruleset accuracy from legacy hit statistics"""
from src.base import ScoreData


def calculate_accuracy(score: ScoreData, ruleset: int) -> float:
    """
    Accuracy in [0, 1] using each ruleset's legacy formula.

    Counts map as in the v1 API: geki/katu carry mania MAX/200 and catch
    droplet misses, count100 is taiko's GOOD.
    """
    n300, n100, n50 = score.count300, score.count100, score.count50
    miss, katu, geki = score.count_miss, score.count_katu, score.count_geki

    if ruleset == 0:
        total = n300 + n100 + n50 + miss
        if total == 0:
            return 0.0
        return (300 * n300 + 100 * n100 + 50 * n50) / (300 * total)

    if ruleset == 1:
        total = n300 + n100 + miss
        if total == 0:
            return 0.0
        return (n300 + 0.5 * n100) / total

    if ruleset == 2:
        hits = n300 + n100 + n50
        total = hits + katu + miss
        if total == 0:
            return 0.0
        return hits / total

    if ruleset == 3:
        total = geki + n300 + katu + n100 + n50 + miss
        if total == 0:
            return 0.0
        return (300 * (geki + n300) + 200 * katu + 100 * n100 + 50 * n50) / (300 * total)

    raise ValueError(f"Unknown ruleset: {ruleset}")
