"""
Schedule rendering service.

One ScheduleService is built when the application starts and handed to the
routes and the CLI; it owns no global state beyond its store and settings.
"""
import os
import logging
from datetime import datetime
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup
from core.grid import flatten_matchday, resolve_team, Grid, DEFAULT_NO_MATCH_MESSAGE
from core.selection import filter_past_matchdays, pick_matchday, resolve_schedule, slugify, FALLBACK_POLICIES
from core.shortcodes import expand_shortcodes, shortcode_atts, is_truthy

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), 'templates')

SCHEDULE_SHORTCODE = 'schedule'
SCHEDULE_SHORTCODE_DEFAULTS = {
    'slug': '',
    'hide_old': '',
    'date': '',  # Optional: pick a single matchday (YYYYMMDD or YYYY-MM-DD)
}


def human_date(ymd):
    """Format 'YYYYMMDD' as e.g. 'January 5, 2025'; '' for anything unparseable."""
    if not ymd:
        return ''
    try:
        d = datetime.strptime(ymd, '%Y%m%d')
    except ValueError:
        return ''
    return f"{d:%B} {d.day}, {d.year}"


def default_schedule_url(slug):
    return f'/schedule/{slug}'


class ScheduleService:
    def __init__(self, store, fallback_policy='published', no_match_message=DEFAULT_NO_MATCH_MESSAGE,
                 schedule_url=default_schedule_url):
        if fallback_policy not in FALLBACK_POLICIES:
            raise ValueError(f"Unknown fallback policy: {fallback_policy!r} (expected one of {FALLBACK_POLICIES})")
        self.store = store
        self.fallback_policy = fallback_policy
        self.no_match_message = no_match_message or DEFAULT_NO_MATCH_MESSAGE
        self.schedule_url = schedule_url
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(['html']),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters['human_date'] = human_date

    def find_schedule(self, slug=''):
        """Resolve a schedule by slug, falling back per the configured policy."""
        schedule = resolve_schedule(self.store.load_schedules(), slug, self.fallback_policy)
        if schedule is not None and slug and schedule.slug != slugify(slug):
            logger.debug(f'Schedule {slug!r} not found, falling back to {schedule.slug!r}')
        return schedule

    def schedule_grids(self, schedule, hide_old=False, date='', today=None):
        """Flatten the schedule's matchdays into renderable entries.

        Returns:
            Tuple of (list of (matchday, Grid or Notice), True if any matchday
            was hidden as past). Matchdays that flatten to an empty grid are
            left out.
        """
        matchdays = schedule.matchdays
        hidden_any = False
        if hide_old:
            matchdays, hidden_any = filter_past_matchdays(matchdays, today)
        if date:
            picked = pick_matchday(matchdays, date)
            matchdays = [picked] if picked else []

        entries = []
        for matchday in matchdays:
            flat = flatten_matchday(matchday, self.no_match_message)
            if isinstance(flat, Grid) and flat.is_empty:
                continue
            entries.append((matchday, flat))
        return entries, hidden_any

    def _badges(self, grid, teams):
        badges = {}
        for row in grid.rows:
            for pair in row.cells:
                for team_id in pair:
                    if team_id and team_id not in teams and team_id not in badges:
                        logger.warning(f'Unknown team id {team_id} in schedule grid')
                    badges.setdefault(team_id, resolve_team(team_id, teams))
        return badges

    def _render(self, schedule, hide_old=False, date='', today=None):
        entries, hidden_any = self.schedule_grids(schedule, hide_old, date, today)
        if not entries:
            return Markup('')

        teams = self.store.load_teams()
        matchdays = []
        for matchday, flat in entries:
            if isinstance(flat, Grid):
                matchdays.append({'matchday': matchday, 'grid': flat, 'badges': self._badges(flat, teams)})
            else:
                matchdays.append({'matchday': matchday, 'notice': flat})

        template = self.env.get_template('partials/schedule.html')
        return Markup(template.render(
            schedule=schedule,
            matchdays=matchdays,
            hidden_any=hidden_any,
            full_schedule_url=self.schedule_url(schedule.slug),
        ))

    def render_schedule(self, slug='', hide_old=False, date='', today=None):
        """Render the schedule markup for a slug; '' when there is nothing to show."""
        schedule = self.find_schedule(slug)
        if schedule is None:
            return Markup('')
        return self._render(schedule, hide_old, date, today)

    def render_schedule_page(self, slug, hide_old=False, today=None):
        """Render a schedule's own page.

        Returns:
            Tuple of (schedule, markup), or (None, None) when no published
            schedule has this slug. The markup is empty when every matchday
            was filtered out.
        """
        schedule = self.store.load_schedule(slug)
        if schedule is None or not schedule.is_published:
            return None, None
        return schedule, self._render(schedule, hide_old, today=today)

    def schedule_shortcode(self, atts, today=None):
        atts = shortcode_atts(SCHEDULE_SHORTCODE_DEFAULTS, atts)
        return self.render_schedule(atts['slug'], is_truthy(atts['hide_old']), atts['date'], today)

    def render_content(self, content, today=None):
        """Expand schedule shortcodes inside page content."""
        handlers = {SCHEDULE_SHORTCODE: lambda atts: self.schedule_shortcode(atts, today)}
        return Markup(expand_shortcodes(content, handlers))

    def schedule_json(self, slug, hide_old=False, date='', today=None):
        """Flattened grids as plain data; None for unknown or draft schedules."""
        schedule = self.store.load_schedule(slug)
        if schedule is None or not schedule.is_published:
            return None
        entries, hidden_any = self.schedule_grids(schedule, hide_old, date, today)
        return {
            'slug': schedule.slug,
            'title': schedule.title,
            'hidden_past': hidden_any,
            'matchdays': [dict(date=m.date, **flat.to_dict()) for m, flat in entries],
        }
