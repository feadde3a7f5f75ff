"""
Tests for the YAML content store.
"""
import pytest
import sys
import os
import yaml
import logging
from datetime import datetime

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from store import ScheduleStore
from core.defaults import DEFAULT_TIERS, DEFAULT_TIMES


class TestTeams:

    def test_load_teams_keyed_by_id(self, store):
        teams = store.load_teams()
        assert sorted(teams) == [1, 2, 3, 4]
        assert teams[1].name == 'Harbor Hawks'

    def test_missing_file(self, tmp_path):
        assert ScheduleStore(str(tmp_path)).load_teams() == {}

    def test_invalid_entries_are_skipped(self, tmp_path):
        (tmp_path / 'teams.yaml').write_text(yaml.dump({'teams': [
            {'name': 'No id'}, {'id': 'abc', 'name': 'Bad id'}, {'id': 2, 'name': 'Good'},
        ]}))
        teams = ScheduleStore(str(tmp_path)).load_teams()
        assert list(teams) == [2]

    def test_unparseable_file_reads_empty(self, tmp_path):
        (tmp_path / 'teams.yaml').write_text('teams: [unclosed')
        assert ScheduleStore(str(tmp_path)).load_teams() == {}

    def test_save_teams(self, store):
        teams = store.load_teams()
        teams[1].name = 'Renamed'
        store.save_teams(teams)
        assert store.load_teams()[1].name == 'Renamed'


class TestTiers:

    def test_seeds_defaults_when_missing(self, tmp_path):
        store = ScheduleStore(str(tmp_path))
        assert store.ensure_tiers() == DEFAULT_TIERS
        assert store.load_tiers() == DEFAULT_TIERS

    def test_keeps_existing_and_adds_missing(self, tmp_path):
        (tmp_path / 'tiers.yaml').write_text(yaml.dump({'tiers': ['Youth', 'Rec']}))
        store = ScheduleStore(str(tmp_path))
        assert store.ensure_tiers() == ['Youth', 'Rec', 'Flex', 'Comp']

    def test_complete_list_is_untouched(self, store):
        assert store.ensure_tiers() == ['Rec', 'Flex', 'Comp']


class TestSchedules:

    def test_load_schedule(self, store):
        schedule = store.load_schedule('spring-2099')
        assert schedule.title == 'Spring 2099'
        assert len(schedule.matchdays) == 2
        assert schedule.matchdays[1].no_match

    def test_load_unknown_schedule(self, store):
        assert store.load_schedule('nope') is None
        assert store.load_schedule('') is None

    def test_slug_comes_from_filename(self, data_dir, store):
        path = data_dir / 'schedules' / 'renamed.yaml'
        path.write_text(yaml.dump({'slug': 'something-else', 'title': 'Renamed'}))
        assert store.load_schedule('renamed').slug == 'renamed'

    def test_load_schedules_sorted(self, store):
        assert [s.slug for s in store.load_schedules()] == ['draft-2100', 'fall-2000', 'spring-2099']

    def test_unquoted_clock_times_stay_text(self, data_dir, store):
        (data_dir / 'schedules' / 'handwritten.yaml').write_text(
            "title: Handwritten\n"
            "matchdays:\n"
            "- match_date: 2025-09-06\n"
            "  fields:\n"
            "  - field_name: North\n"
            "    times:\n"
            "    - time_label: 9:00\n"
            "      home_team: 1\n"
            "      away_team: 2\n"
            "    - time_label: 10:30\n"
        )
        schedule = store.load_schedule('handwritten')
        times = schedule.matchdays[0].fields[0].times
        assert [t.label for t in times] == ['9:00', '10:30']
        assert times[0].home_team == 1
        assert schedule.matchdays[0].date == '20250906'

    def test_leading_zero_clock_time_stays_text(self, data_dir, store):
        (data_dir / 'schedules' / 'early.yaml').write_text(
            "title: Early\n"
            "matchdays:\n"
            "- fields:\n"
            "  - field_name: North\n"
            "    times:\n"
            "    - time_label: 0730\n"
            "    - time_label: 0900\n"
        )
        times = store.load_schedule('early').matchdays[0].fields[0].times
        assert [t.label for t in times] == ['0730', '0900']

    def test_file_not_named_by_slug_is_listed(self, data_dir, store, caplog):
        (data_dir / 'schedules' / 'Fall_2025.yaml').write_text(yaml.dump({'title': 'Fall 2025'}))
        with caplog.at_level(logging.WARNING, logger='store'):
            slugs = [s.slug for s in store.load_schedules()]
        assert 'fall2025' in slugs
        assert 'Fall_2025.yaml' in caplog.text

    def test_file_not_named_by_slug_loads_by_slug(self, data_dir, store):
        (data_dir / 'schedules' / 'Fall 2025.yaml').write_text(yaml.dump({'title': 'Fall 2025'}))
        schedule = store.load_schedule('fall-2025')
        assert schedule.title == 'Fall 2025'
        assert schedule.slug == 'fall-2025'

    def test_file_without_usable_name_is_skipped(self, data_dir, store, caplog):
        (data_dir / 'schedules' / '___.yaml').write_text(yaml.dump({'title': 'Nameless'}))
        with caplog.at_level(logging.WARNING, logger='store'):
            titles = [s.title for s in store.load_schedules()]
        assert 'Nameless' not in titles
        assert '___.yaml' in caplog.text

    def test_create_refuses_slug_of_misnamed_file(self, data_dir, store):
        (data_dir / 'schedules' / 'Winter 2026.yaml').write_text(yaml.dump({'title': 'Winter 2026'}))
        with pytest.raises(FileExistsError):
            store.create_schedule('Winter 2026')

    def test_unquoted_and_quoted_timestamps_compare(self, data_dir, store):
        """YAML parses the unquoted timestamp; the quoted one stays text."""
        (data_dir / 'schedules' / 'first.yaml').write_text(
            "title: First\npublished: 2025-08-15 09:00:00\n")
        (data_dir / 'schedules' / 'second.yaml').write_text(
            "title: Second\npublished: '2025-08-15 10:00:00'\n")
        schedules = {s.slug: s for s in store.load_schedules()}
        assert schedules['first'].published == datetime(2025, 8, 15, 9, 0)
        assert schedules['second'].published == datetime(2025, 8, 15, 10, 0)

    def test_create_schedule_is_prefilled(self, store):
        schedule = store.create_schedule('Winter League 2026')
        assert schedule.slug == 'winter-league-2026'
        assert schedule.id == 4
        assert schedule.is_published
        assert schedule.published.microsecond == 0
        matchday = schedule.matchdays[0]
        assert matchday.date is None
        assert [f.name for f in matchday.fields] == ['Field 1', 'Field 2', 'Field 3']
        assert [t.label for t in matchday.fields[0].times] == DEFAULT_TIMES

        reloaded = store.load_schedule('winter-league-2026')
        assert reloaded.title == 'Winter League 2026'
        assert [f.bg_color for f in reloaded.matchdays[0].fields] == ['#f4cccc', '#d9d2e9', '#cfe1f3']
        assert [t.label for t in reloaded.matchdays[0].fields[2].times] == ['9:00', '10:30']

    def test_create_draft_with_explicit_slug(self, store):
        schedule = store.create_schedule('Anything', slug='My Slug', publish=False)
        assert schedule.slug == 'my-slug'
        assert not store.load_schedule('my-slug').is_published

    def test_create_requires_title(self, store):
        with pytest.raises(ValueError):
            store.create_schedule('   ')

    def test_create_rejects_unusable_slug(self, store):
        with pytest.raises(ValueError):
            store.create_schedule('!!!')

    def test_create_duplicate(self, store):
        with pytest.raises(FileExistsError):
            store.create_schedule('Fall 2000')


class TestPages:

    def test_load_page(self, store):
        page = store.load_page('league')
        assert page.title == 'League'
        assert '[schedule slug="spring-2099"]' in page.content

    def test_unknown_page(self, store):
        assert store.load_page('missing') is None
