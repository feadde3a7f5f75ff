"""
Flattening of a matchday's nested fields/times into a time-indexed grid.

A matchday stores, per playing field, an ordered list of time slots. The
rendered table instead has one column per field and one row per distinct
time label, so the nested structure is transposed here. Nothing in this
module raises on bad input: blank names, unset teams and missing slots all
degrade to placeholders.
"""
import re
from urllib.parse import urlsplit

DEFAULT_NO_MATCH_MESSAGE = 'No matches scheduled this week.'
TEAM_PLACEHOLDER = '—'

_HEX_COLOR_RE = re.compile(r'^#([A-Fa-f0-9]{3}){1,2}$')
_UNSAFE_URL_CHARS_RE = re.compile(r'[\x00-\x20\x7f]')
_SAFE_URL_SCHEMES = ('', 'http', 'https')


class Column:
    def __init__(self, name, bg_color=None):
        self.name = name
        self.bg_color = bg_color

    def __repr__(self):
        return f"Column(name={self.name}, bg_color={self.bg_color})"


class Row:
    def __init__(self, time_label, cells):
        self.time_label = time_label
        self.cells = cells  # One (home_id, away_id) tuple per column

    def __repr__(self):
        return f"Row(time_label={self.time_label}, cells={self.cells})"


class Grid:
    def __init__(self, columns=None, rows=None):
        self.columns = columns if columns else []
        self.rows = rows if rows else []

    @property
    def is_empty(self):
        return not self.columns

    def to_dict(self):
        return {
            'columns': [{'name': c.name, 'bg_color': c.bg_color} for c in self.columns],
            'rows': [
                {'time': r.time_label, 'cells': [{'home': h, 'away': a} for h, a in r.cells]}
                for r in self.rows
            ],
        }

    def __repr__(self):
        return f"Grid(columns={len(self.columns)}, rows={len(self.rows)})"


class Notice:
    """Stands in for a grid when a matchday is flagged as having no matches."""

    def __init__(self, message):
        self.message = message

    def to_dict(self):
        return {'notice': self.message}

    def __repr__(self):
        return f"Notice(message={self.message})"


class TeamBadge:
    def __init__(self, name, logo_url=None, style='', placeholder=False):
        self.name = name
        self.logo_url = logo_url
        self.style = style
        self.placeholder = placeholder

    def __repr__(self):
        return f"TeamBadge(name={self.name}, placeholder={self.placeholder})"


def sanitize_hex_color(color):
    """Return the color if it is a #rgb or #rrggbb string, else ''."""
    if not color:
        return ''
    color = str(color).strip()
    return color if _HEX_COLOR_RE.match(color) else ''


def safe_url(url):
    """Return the URL if it is http(s) or relative, else None.

    Logo URLs land in an <img src>, so script-capable schemes such as
    javascript: and data: are dropped along with anything containing
    whitespace or control characters.
    """
    if not url:
        return None
    url = str(url).strip()
    if not url or _UNSAFE_URL_CHARS_RE.search(url):
        return None
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError:
        return None
    return url if scheme in _SAFE_URL_SCHEMES else None


def column_label(field_block, position):
    """Display name for a field column; position is 1-based."""
    return field_block.name if field_block.name else f"Field {position}"


def collect_time_labels(fields):
    """Ordered, de-duplicated, trimmed non-empty time labels across all fields."""
    labels = {}
    for field_block in fields:
        for slot in field_block.times:
            label = (slot.label or '').strip()
            if label:
                labels.setdefault(label, True)
    return list(labels)


def find_slot(field_block, time_label):
    """First slot in the field whose trimmed label equals time_label, or None."""
    for slot in field_block.times:
        if (slot.label or '').strip() == time_label:
            return slot
    return None


def flatten_matchday(matchday, no_match_message=DEFAULT_NO_MATCH_MESSAGE):
    """Flatten a matchday into a Grid, or a Notice when it has no matches.

    Args:
        matchday: The Matchday to flatten.
        no_match_message: Fallback text when the matchday is flagged as
            having no matches and carries no message of its own.

    Returns:
        A Notice for no-match matchdays, otherwise a Grid. The grid is empty
        (no columns, no rows) when the matchday has no fields.
    """
    if matchday.no_match:
        return Notice(matchday.no_match_message or no_match_message)

    fields = matchday.fields
    if not fields:
        return Grid()

    columns = [
        Column(column_label(field_block, i), sanitize_hex_color(field_block.bg_color) or None)
        for i, field_block in enumerate(fields, start=1)
    ]

    rows = []
    for label in collect_time_labels(fields):
        cells = []
        for field_block in fields:
            slot = find_slot(field_block, label)
            if slot is None:
                cells.append((None, None))
            else:
                cells.append((slot.home_team, slot.away_team))
        rows.append(Row(label, cells))

    return Grid(columns, rows)


def resolve_team(team_id, teams):
    """Build the display badge for a team id.

    Unset ids and ids with no matching team both yield the placeholder badge.
    Colors and the logo URL are sanitized; unusable values are dropped.
    """
    team = teams.get(team_id) if team_id else None
    if team is None:
        return TeamBadge(TEAM_PLACEHOLDER, placeholder=True)

    style = []
    bg = sanitize_hex_color(team.bg_color)
    text = sanitize_hex_color(team.text_color)
    if bg:
        style.append(f"background-color:{bg}")
    if text:
        style.append(f"color:{text}")

    return TeamBadge(team.name, logo_url=safe_url(team.logo_url), style=';'.join(style))
