"""
Choosing what to render: which schedule, which matchdays.
"""
import re
from datetime import date as date_cls, datetime

FALLBACK_POLICIES = ('published', 'schedule_date')


def slugify(name: str) -> str:
    """Convert a title or user-supplied slug to a URL-safe slug."""
    slug = (name or '').lower().strip()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'[\s-]+', '-', slug)
    return slug.strip('-')


def normalize_date(value) -> str:
    """Reduce 'YYYY-MM-DD' or 'YYYYMMDD' to 'YYYYMMDD'; anything else to ''."""
    if not value:
        return ''
    digits = re.sub(r'[^0-9]', '', str(value))
    return digits if len(digits) == 8 else ''


def today_ymd(today=None) -> str:
    """Today's date (or the given date) as 'YYYYMMDD'."""
    if isinstance(today, str):
        return normalize_date(today)
    return (today or date_cls.today()).strftime('%Y%m%d')


def filter_past_matchdays(matchdays, today=None):
    """Drop matchdays dated strictly before today.

    Undated matchdays are kept. Dates are zero-padded 'YYYYMMDD' strings, so
    a lexical compare orders them correctly.

    Returns:
        Tuple of (visible matchdays, True if any matchday was hidden).
    """
    cutoff = today_ymd(today)
    visible = [m for m in matchdays if not m.date or m.date >= cutoff]
    return visible, len(visible) != len(matchdays)


def pick_matchday(matchdays, date=None):
    """Pick the matchday on the given date, else the newest dated one."""
    if not matchdays:
        return None

    needle = normalize_date(date)
    if needle:
        for matchday in matchdays:
            if matchday.date and matchday.date == needle:
                return matchday

    # sorted() is stable, so undated matchdays keep their stored order at the end
    ordered = sorted(matchdays, key=lambda m: int(normalize_date(m.date) or 0), reverse=True)
    return ordered[0]


def _published_key(schedule):
    return schedule.published or datetime.min


def _schedule_date_key(schedule):
    return (normalize_date(schedule.schedule_date), schedule.published or datetime.min)


def resolve_schedule(schedules, slug='', policy='published'):
    """Find a schedule by slug, falling back to the latest published one.

    Args:
        schedules: Iterable of Schedule records.
        slug: Requested slug; slugified before matching. An exact match wins
            regardless of publish status.
        policy: How "latest" is decided when the slug is missing or unknown.
            'published' orders by publish timestamp, 'schedule_date' by the
            schedule date field with publish timestamp as tie-break.

    Returns:
        The matching Schedule, or None when there is nothing published.
    """
    schedules = list(schedules)
    wanted = slugify(slug)
    if wanted:
        for schedule in schedules:
            if schedule.slug == wanted:
                return schedule

    published = [s for s in schedules if s.is_published]
    if not published:
        return None

    if policy == 'schedule_date':
        return max(published, key=_schedule_date_key)
    if policy != 'published':
        raise ValueError(f"Unknown fallback policy: {policy!r} (expected one of {FALLBACK_POLICIES})")
    return max(published, key=_published_key)
