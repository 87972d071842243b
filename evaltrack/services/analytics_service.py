from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from evaltrack.models.evaluation import PerformanceScore

DISTRIBUTION_BUCKETS = (
    "Outstanding",
    "Exceeds Expectations",
    "Meets Expectations",
    "Below Expectations",
)

TREND_MONTHS = 6


def bucket_for(score: int) -> Optional[str]:
    if score == 5:
        return "Outstanding"
    if score == 4:
        return "Exceeds Expectations"
    if score == 3:
        return "Meets Expectations"
    if 1 <= score <= 2:
        return "Below Expectations"
    return None


def evaluation_distribution(db: Session) -> List[Dict]:
    scores = [row.score for row in db.query(PerformanceScore.score).all()]
    if not scores:
        return []
    counts = {name: 0 for name in DISTRIBUTION_BUCKETS}
    for score in scores:
        bucket = bucket_for(score)
        if bucket:
            counts[bucket] += 1
    return [{"name": name, "value": value} for name, value in counts.items()]


def _month_window(today: date, months: int) -> List[Tuple[int, int]]:
    """(year, month) pairs for the last `months` calendar months, oldest first."""
    window = []
    year, month = today.year, today.month
    for _ in range(months):
        window.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(window))


def performance_trends(db: Session, today: Optional[date] = None) -> List[Dict]:
    """Average score per calendar month over the trailing six months."""
    rows = db.query(PerformanceScore.score, PerformanceScore.evaluation_date).all()
    if not rows:
        return []

    window = _month_window(today or date.today(), TREND_MONTHS)
    totals: Dict[Tuple[int, int], List[int]] = {key: [] for key in window}
    for score, evaluated_at in rows:
        key = (evaluated_at.year, evaluated_at.month)
        if key in totals:
            totals[key].append(score)

    trend = []
    for year, month in window:
        values = totals[(year, month)]
        trend.append({
            "name": datetime(year, month, 1).strftime("%b"),
            "avgScore": round(sum(values) / len(values), 1) if values else None,
        })
    return trend
