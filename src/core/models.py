from datetime import date, datetime, time, timezone
from core.selection import normalize_date


def _team_ref(value):
    """Normalize a stored team reference. 0, '' and missing all mean unset."""
    if value in (None, '', 0, '0'):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _text(value):
    return str(value).strip() if value is not None else ''


def _timestamp(value):
    """Parse a publish timestamp into a naive datetime, or None.

    YAML hands back a datetime for unquoted timestamps and a string for
    quoted ones; both end up comparable. Aware values are converted to UTC.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    else:
        text = _text(value)
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class Team:
    def __init__(self, id, name, bg_color=None, text_color=None, logo_url=None, tier=None):
        self.id = id
        self.name = name
        self.bg_color = bg_color
        self.text_color = text_color
        self.logo_url = logo_url
        self.tier = tier

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data['id']),
            name=_text(data.get('name')),
            bg_color=data.get('bg_color') or None,
            text_color=data.get('text_color') or None,
            logo_url=data.get('logo_url') or None,
            tier=data.get('tier') or None,
        )

    def to_dict(self):
        data = {'id': self.id, 'name': self.name}
        for key in ('bg_color', 'text_color', 'logo_url', 'tier'):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data

    def __repr__(self):
        return f"Team(id={self.id}, name={self.name}, tier={self.tier})"


class TimeSlot:
    def __init__(self, label, home_team=None, away_team=None):
        self.label = label  # Free text, used only as a grouping key
        self.home_team = home_team
        self.away_team = away_team

    @classmethod
    def from_dict(cls, data):
        return cls(
            label=_text(data.get('time_label')),
            home_team=_team_ref(data.get('home_team')),
            away_team=_team_ref(data.get('away_team')),
        )

    def to_dict(self):
        return {
            'time_label': self.label,
            'home_team': self.home_team or 0,
            'away_team': self.away_team or 0,
        }

    def __repr__(self):
        return f"TimeSlot(label={self.label}, home={self.home_team}, away={self.away_team})"


class FieldBlock:
    def __init__(self, name='', bg_color=None, times=None):
        self.name = name
        self.bg_color = bg_color
        self.times = times if times else []

    @classmethod
    def from_dict(cls, data):
        times = data.get('times') or []
        return cls(
            name=_text(data.get('field_name')),
            bg_color=data.get('field_bg') or None,
            times=[TimeSlot.from_dict(t) for t in times if isinstance(t, dict)],
        )

    def to_dict(self):
        return {
            'field_name': self.name,
            'field_bg': self.bg_color or '',
            'times': [t.to_dict() for t in self.times],
        }

    def __repr__(self):
        return f"FieldBlock(name={self.name}, times={len(self.times)})"


class Matchday:
    def __init__(self, date=None, fields=None, no_match=False, no_match_message=None):
        self.date = date  # 'YYYYMMDD' or None
        self.fields = fields if fields else []
        self.no_match = no_match
        self.no_match_message = no_match_message

    @classmethod
    def from_dict(cls, data):
        fields = data.get('fields') or []
        date = normalize_date(data.get('match_date'))
        return cls(
            date=date or None,
            fields=[FieldBlock.from_dict(f) for f in fields if isinstance(f, dict)],
            no_match=bool(data.get('no_match')),
            no_match_message=_text(data.get('no_match_message')) or None,
        )

    def to_dict(self):
        data = {
            'match_date': self.date or '',
            'fields': [f.to_dict() for f in self.fields],
        }
        if self.no_match:
            data['no_match'] = True
            data['no_match_message'] = self.no_match_message or ''
        return data

    def __repr__(self):
        return f"Matchday(date={self.date}, no_match={self.no_match}, fields={len(self.fields)})"


class Schedule:
    def __init__(self, id, slug, title, matchdays=None, status='publish', published=None, schedule_date=None):
        self.id = id
        self.slug = slug
        self.title = title
        self.matchdays = matchdays if matchdays else []
        self.status = status
        self.published = published  # naive datetime or None
        self.schedule_date = schedule_date  # 'YYYYMMDD' or None

    @property
    def is_published(self):
        return self.status == 'publish'

    @classmethod
    def from_dict(cls, data):
        matchdays = data.get('matchdays') or []
        return cls(
            id=data.get('id'),
            slug=_text(data.get('slug')),
            title=_text(data.get('title')),
            matchdays=[Matchday.from_dict(m) for m in matchdays if isinstance(m, dict)],
            status=data.get('status') or 'publish',
            published=_timestamp(data.get('published')),
            schedule_date=normalize_date(data.get('schedule_date')) or None,
        )

    def to_dict(self):
        data = {
            'id': self.id,
            'slug': self.slug,
            'title': self.title,
            'status': self.status,
            'published': self.published.isoformat(timespec='seconds') if self.published else '',
            'matchdays': [m.to_dict() for m in self.matchdays],
        }
        if self.schedule_date:
            data['schedule_date'] = self.schedule_date
        return data

    def __repr__(self):
        return f"Schedule(slug={self.slug}, title={self.title}, matchdays={len(self.matchdays)})"


class Page:
    def __init__(self, slug, title, content=''):
        self.slug = slug
        self.title = title
        self.content = content

    def __repr__(self):
        return f"Page(slug={self.slug}, title={self.title})"
