# Console entry point: print a schedule's matchday grids

import argparse
import logging
import os
import sys
from core.grid import Grid, resolve_team
from service import ScheduleService, human_date
from store import ScheduleStore


def format_cell(pair, teams):
    home, away = (resolve_team(team_id, teams).name for team_id in pair)
    return f"{home} vs {away}"


def print_schedule(service, slug='', hide_old=False, date=''):
    """Print every visible matchday of a schedule. Returns False if nothing was printed."""
    schedule = service.find_schedule(slug)
    if schedule is None:
        print("No schedule found.")
        return False

    entries, hidden_any = service.schedule_grids(schedule, hide_old=hide_old, date=date)
    print(f"\n=== {schedule.title} ===")
    if not entries:
        print("No matchdays to show.")
        return False

    teams = service.store.load_teams()
    for matchday, flat in entries:
        print(f"\n{human_date(matchday.date) or 'Date TBD'}")
        if not isinstance(flat, Grid):
            print(f"  {flat.message}")
            continue
        print("  Time    | " + " | ".join(column.name for column in flat.columns))
        for row in flat.rows:
            cells = " | ".join(format_cell(pair, teams) for pair in row.cells)
            print(f"  {row.time_label:<7} | {cells}")

    if hidden_any:
        print("\n(Past matchdays hidden; run without --hide-old for the full schedule.)")
    return True


def main():
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    parser = argparse.ArgumentParser(description='Print a schedule as a time-by-field grid')
    parser.add_argument('--data-dir', default=os.environ.get('SCHEDULE_DATA_DIR', os.path.join(base_dir, 'data')),
                        help='Content directory (default: data/ or $SCHEDULE_DATA_DIR)')
    parser.add_argument('--slug', default='', help='Schedule slug (default: latest published)')
    parser.add_argument('--hide-old', action='store_true', help='Skip matchdays before today')
    parser.add_argument('--date', default='', help='Show only the matchday on this date (YYYYMMDD or YYYY-MM-DD)')
    parser.add_argument('--fallback-policy', choices=['published', 'schedule_date'],
                        default=os.environ.get('SCHEDULE_FALLBACK_POLICY', 'published'),
                        help='How the latest schedule is chosen when --slug is missing or unknown')
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format='%(levelname)s %(name)s: %(message)s')

    service = ScheduleService(ScheduleStore(args.data_dir), fallback_policy=args.fallback_policy)
    if not print_schedule(service, args.slug, args.hide_old, args.date):
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
