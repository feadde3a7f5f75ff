"""
YAML-on-disk content store for teams, tiers, schedules and pages.

Layout of a data directory:

    teams.yaml              {'teams': [{id, name, bg_color, text_color, logo_url, tier}, ...]}
    tiers.yaml              {'tiers': ['Rec', 'Flex', 'Comp']}
    pages.yaml              {'pages': [{slug, title, content}, ...]}
    schedules/<slug>.yaml   one schedule per file
"""
import os
import re
import logging
import yaml
from datetime import datetime
from filelock import FileLock
from core.models import Team, Schedule, Page
from core.defaults import default_matchday, DEFAULT_TIERS
from core.selection import slugify

logger = logging.getLogger(__name__)

_INT_TAG = 'tag:yaml.org,2002:int'
# YAML 1.1 int syntax minus base-60 and leading-zero octal, so clock times
# like 9:00 and 0730 stay strings
_INT_RE = re.compile(r'^(?:[-+]?0b[0-1_]+|[-+]?(?:0|[1-9][0-9_]*)|[-+]?0x[0-9a-fA-F_]+)$')


class _ContentLoader(yaml.SafeLoader):
    pass


_ContentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _INT_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_ContentLoader.add_implicit_resolver(_INT_TAG, _INT_RE, list('-+0123456789'))


class ScheduleStore:
    def __init__(self, data_dir):
        self.data_dir = data_dir
        self.schedules_dir = os.path.join(data_dir, 'schedules')
        os.makedirs(self.schedules_dir, exist_ok=True)
        self._lock = FileLock(os.path.join(data_dir, '.lock'), timeout=10)

    def _path(self, filename):
        return os.path.join(self.data_dir, filename)

    def _read_yaml(self, path):
        """Load a YAML file; missing or unparseable files read as None."""
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return yaml.load(f, Loader=_ContentLoader)
        except yaml.YAMLError as e:
            logger.warning(f'Failed to parse {path}: {e}')
            return None

    def _write_yaml(self, path, data):
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    # Teams

    def load_teams(self) -> dict:
        """Load teams keyed by id. Entries without a usable id are skipped."""
        data = self._read_yaml(self._path('teams.yaml'))
        if not isinstance(data, dict):
            return {}
        teams = {}
        for entry in data.get('teams') or []:
            try:
                team = Team.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning(f'Skipping team entry without a valid id: {entry!r}')
                continue
            teams[team.id] = team
        return teams

    def save_teams(self, teams):
        with self._lock:
            self._write_yaml(self._path('teams.yaml'),
                             {'teams': [t.to_dict() for t in sorted(teams.values(), key=lambda t: t.id)]})

    # Tiers

    def load_tiers(self) -> list:
        data = self._read_yaml(self._path('tiers.yaml'))
        if not isinstance(data, dict):
            return []
        return [str(t) for t in data.get('tiers') or []]

    def ensure_tiers(self) -> list:
        """Seed the default tiers when none are defined; return the tier list."""
        with self._lock:
            tiers = self.load_tiers()
            missing = [t for t in DEFAULT_TIERS if t not in tiers]
            if tiers and not missing:
                return tiers
            tiers = tiers + missing
            self._write_yaml(self._path('tiers.yaml'), {'tiers': tiers})
            logger.info(f'Seeded tiers: {", ".join(missing)}')
            return tiers

    # Schedules

    def _schedule_path(self, slug):
        return os.path.join(self.schedules_dir, f'{slug}.yaml')

    def _load_schedule_file(self, path, slug):
        data = self._read_yaml(path)
        if not isinstance(data, dict):
            return None
        data['slug'] = slug
        return Schedule.from_dict(data)

    def load_schedule(self, slug):
        """Load one schedule by slug, or None if it does not exist.

        Files whose name is not itself a slug are found by scanning the
        directory.
        """
        slug = slugify(slug)
        if not slug:
            return None
        path = self._schedule_path(slug)
        if os.path.exists(path):
            return self._load_schedule_file(path, slug)
        for schedule in self.load_schedules():
            if schedule.slug == slug:
                return schedule
        return None

    def load_schedules(self) -> list:
        """Load every schedule in the data directory, ordered by filename.

        The slug comes from the filename. A filename that is not a valid slug
        (e.g. fall_2025.yaml) is still loaded, under its slugified name.
        """
        schedules = []
        for filename in sorted(os.listdir(self.schedules_dir)):
            if not filename.endswith('.yaml'):
                continue
            stem = filename[:-len('.yaml')]
            slug = slugify(stem)
            if not slug:
                logger.warning(f'Skipping schedule file {filename}: name has no letters or numbers')
                continue
            if slug != stem:
                logger.warning(f'Schedule file {filename} is not named by its slug; serving it as {slug!r}')
            schedule = self._load_schedule_file(os.path.join(self.schedules_dir, filename), slug)
            if schedule is None:
                logger.warning(f'Skipping schedule file {filename}: not a schedule mapping')
                continue
            schedules.append(schedule)
        return schedules

    def save_schedule(self, schedule):
        with self._lock:
            self._write_yaml(self._schedule_path(schedule.slug), schedule.to_dict())

    def create_schedule(self, title, slug=None, publish=True):
        """Create a schedule with one prefilled matchday.

        Returns:
            The new Schedule.

        Raises:
            ValueError: If the title is blank.
            FileExistsError: If a schedule with the slug already exists.
        """
        title = (title or '').strip()
        if not title:
            raise ValueError('Schedule title is required.')
        slug = slugify(slug or title)
        if not slug:
            raise ValueError('Schedule slug must contain letters or numbers.')

        with self._lock:
            existing = self.load_schedules()
            if os.path.exists(self._schedule_path(slug)) or any(s.slug == slug for s in existing):
                raise FileExistsError(f'Schedule "{slug}" already exists.')
            existing_ids = [s.id for s in existing if isinstance(s.id, int)]
            schedule = Schedule(
                id=max(existing_ids, default=0) + 1,
                slug=slug,
                title=title,
                matchdays=[default_matchday()],
                status='publish' if publish else 'draft',
                published=datetime.now().replace(microsecond=0),
            )
            self._write_yaml(self._schedule_path(slug), schedule.to_dict())
        logger.info(f'Created schedule {slug!r} ({schedule.status})')
        return schedule

    # Pages

    def load_pages(self) -> dict:
        data = self._read_yaml(self._path('pages.yaml'))
        if not isinstance(data, dict):
            return {}
        pages = {}
        for entry in data.get('pages') or []:
            if not isinstance(entry, dict) or not entry.get('slug'):
                continue
            slug = slugify(str(entry['slug']))
            pages[slug] = Page(slug=slug, title=str(entry.get('title') or ''),
                               content=str(entry.get('content') or ''))
        return pages

    def load_page(self, slug):
        return self.load_pages().get(slugify(slug))
