"""
Shared pytest fixtures for schedule tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import yaml

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.models import Team, TimeSlot, FieldBlock, Matchday


SAMPLE_TEAMS = [
    {'id': 1, 'name': 'Harbor Hawks', 'bg_color': '#1f3a93', 'text_color': '#fff', 'tier': 'Rec',
     'logo_url': 'https://example.com/hawks.png'},
    {'id': 2, 'name': 'Northside United', 'bg_color': '#c0392b', 'tier': 'Rec'},
    {'id': 3, 'name': 'Lakeview FC', 'tier': 'Flex'},
    {'id': 4, 'name': 'Riverside Rovers', 'tier': 'Comp'},
]


def write_schedule(data_dir, data):
    """Write a raw schedule dict to <data_dir>/schedules/<slug>.yaml."""
    schedules_dir = os.path.join(str(data_dir), 'schedules')
    os.makedirs(schedules_dir, exist_ok=True)
    with open(os.path.join(schedules_dir, f"{data['slug']}.yaml"), 'w', encoding='utf-8') as f:
        yaml.dump(data, f, default_flow_style=False)


@pytest.fixture
def teams():
    """Teams keyed by id."""
    return {t['id']: Team.from_dict(t) for t in SAMPLE_TEAMS}


@pytest.fixture
def three_field_matchday():
    """Three fields sharing the same two time labels."""
    return Matchday(date='20250906', fields=[
        FieldBlock(name='North', bg_color='#f4cccc', times=[TimeSlot('9:00', 1, 2), TimeSlot('10:30', 3, 4)]),
        FieldBlock(name='South', times=[TimeSlot('9:00', 2, 3), TimeSlot('10:30', 4, 1)]),
        FieldBlock(name='East', times=[TimeSlot('9:00', 3, 1), TimeSlot('10:30', 2, 4)]),
    ])


@pytest.fixture
def data_dir(tmp_path):
    """Temporary content directory with teams, tiers, two schedules and a page."""
    (tmp_path / 'teams.yaml').write_text(yaml.dump({'teams': SAMPLE_TEAMS}, default_flow_style=False))
    (tmp_path / 'tiers.yaml').write_text(yaml.dump({'tiers': ['Rec', 'Flex', 'Comp']}, default_flow_style=False))
    (tmp_path / 'pages.yaml').write_text(yaml.dump({'pages': [
        {'slug': 'league', 'title': 'League', 'content': '<p>Intro</p>\n[schedule slug="spring-2099"]'},
        {'slug': 'upcoming', 'title': 'Upcoming', 'content': '[schedule slug="fall-2000" hide_old="1"]'},
    ]}, default_flow_style=False))

    write_schedule(tmp_path, {
        'id': 1,
        'slug': 'fall-2000',
        'title': 'Fall 2000',
        'status': 'publish',
        'published': '2000-08-01T09:00:00',
        'schedule_date': '20000901',
        'matchdays': [
            {'match_date': '20000901', 'fields': [
                {'field_name': 'North', 'field_bg': '#f4cccc', 'times': [
                    {'time_label': '9:00', 'home_team': 1, 'away_team': 2},
                ]},
            ]},
        ],
    })
    write_schedule(tmp_path, {
        'id': 2,
        'slug': 'spring-2099',
        'title': 'Spring 2099',
        'status': 'publish',
        'published': '1999-01-01T09:00:00',
        'schedule_date': '20990301',
        'matchdays': [
            {'match_date': '20990301', 'fields': [
                {'field_name': '', 'field_bg': '#cfe1f3', 'times': [
                    {'time_label': '9:00', 'home_team': 3, 'away_team': 4},
                    {'time_label': '10:30', 'home_team': 0, 'away_team': 0},
                ]},
                {'field_name': 'South', 'times': []},
            ]},
            {'match_date': '20990308', 'no_match': True, 'no_match_message': ''},
        ],
    })
    write_schedule(tmp_path, {
        'id': 3,
        'slug': 'draft-2100',
        'title': 'Draft 2100',
        'status': 'draft',
        'published': '2100-01-01T09:00:00',
        'matchdays': [],
    })
    return tmp_path


@pytest.fixture
def store(data_dir):
    from store import ScheduleStore
    return ScheduleStore(str(data_dir))


@pytest.fixture
def service(store):
    from service import ScheduleService
    return ScheduleService(store)


@pytest.fixture
def client(data_dir):
    """Test client for an app serving the temporary content directory."""
    from app import create_app
    app = create_app({'DATA_DIR': str(data_dir), 'TESTING': True})
    with app.test_client() as client:
        yield client
