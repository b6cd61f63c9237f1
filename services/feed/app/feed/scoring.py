"""Pure engagement scoring functions: no I/O, no framework imports.

score = (likes*3 + views*0.5 + avg_watch_time*2 + shares*10) * decay * boost

  decay = 0.5 ** (age_days / 7)           half-life of 7 days
  boost = 2.0 under 24 h, 1.5 under 48 h, else 1.0

The result is rounded half-up to two decimals. Missing or malformed
interaction data counts as zero; these functions never raise for it.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class ScoreWeights:
    """Per-signal weights and time constants for the engagement score."""

    like: float = 3.0
    view: float = 0.5
    watch_time: float = 2.0
    share: float = 10.0
    half_life_days: float = 7.0
    # (max age in hours, multiplier), checked in order
    boost_steps: tuple[tuple[float, float], ...] = ((24.0, 2.0), (48.0, 1.5))


DEFAULT_SCORE_WEIGHTS = ScoreWeights()


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def age_in_hours(created_at: datetime, now: datetime | None = None) -> float:
    """Age of an item in hours, clamped at 0 for timestamps in the future."""
    now = _as_utc(now or datetime.now(timezone.utc))
    return max(0.0, (now - _as_utc(created_at)).total_seconds() / 3600.0)


def decay_factor(age_days: float, weights: ScoreWeights = DEFAULT_SCORE_WEIGHTS) -> float:
    return math.pow(0.5, max(0.0, age_days) / weights.half_life_days)


def recency_boost(age_hours: float, weights: ScoreWeights = DEFAULT_SCORE_WEIGHTS) -> float:
    for max_age, multiplier in weights.boost_steps:
        if age_hours < max_age:
            return multiplier
    return 1.0


def base_score(
    likes: int,
    views: int,
    shares: int,
    avg_watch_time: float,
    weights: ScoreWeights = DEFAULT_SCORE_WEIGHTS,
) -> float:
    return (
        likes * weights.like
        + views * weights.view
        + avg_watch_time * weights.watch_time
        + shares * weights.share
    )


def round_score(value: float) -> float:
    """Round half-up to 2 decimals (Python's round() is half-to-even).

    Non-finite input (overflowed counters) scores 0.
    """
    scaled = value * 100.0 + 0.5
    if not math.isfinite(scaled):
        return 0.0
    return math.floor(scaled) / 100.0


def compute_engagement_score(
    likes: int,
    views: int,
    shares: int,
    avg_watch_time: float,
    created_at: datetime,
    now: datetime | None = None,
    weights: ScoreWeights = DEFAULT_SCORE_WEIGHTS,
) -> float:
    hours = age_in_hours(created_at, now)
    raw = (
        base_score(likes, views, shares, avg_watch_time, weights)
        * decay_factor(hours / 24.0, weights)
        * recency_boost(hours, weights)
    )
    return round_score(raw)


def _count(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def score_item(
    item: Any,
    now: datetime | None = None,
    weights: ScoreWeights = DEFAULT_SCORE_WEIGHTS,
) -> float:
    """Score any object exposing the ContentItem counter attributes.

    Reads like_count, view_count, share_count, view_duration_total and
    created_at. Absent or unusable values count as zero; an item without
    a usable created_at is treated as brand new.
    """
    likes = _count(getattr(item, "like_count", 0))
    views = _count(getattr(item, "view_count", 0))
    shares = _count(getattr(item, "share_count", 0))
    total_duration = _count(getattr(item, "view_duration_total", 0))
    avg_watch_time = total_duration / views if views > 0 else 0.0

    created_at = getattr(item, "created_at", None)
    if not isinstance(created_at, datetime):
        created_at = now or datetime.now(timezone.utc)

    return compute_engagement_score(
        likes, views, shares, avg_watch_time, created_at, now, weights
    )
