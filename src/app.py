"""
Flask web application for Teams & Schedule.
"""
import os
from flask import Flask, render_template, request, jsonify, url_for, abort, Response
from core.grid import resolve_team, DEFAULT_NO_MATCH_MESSAGE
from core.shortcodes import is_truthy
from store import ScheduleStore
from service import ScheduleService

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DEFAULT_DATA_DIR = os.path.join(BASE_DIR, 'data')
UNASSIGNED_TIER = 'Unassigned'


def load_config(overrides=None) -> dict:
    """Settings from the environment, with explicit overrides applied last."""
    config = {
        'DATA_DIR': os.environ.get('SCHEDULE_DATA_DIR', DEFAULT_DATA_DIR),
        'FALLBACK_POLICY': os.environ.get('SCHEDULE_FALLBACK_POLICY', 'published'),
        'NO_MATCH_MESSAGE': os.environ.get('SCHEDULE_NO_MATCH_MESSAGE', DEFAULT_NO_MATCH_MESSAGE),
    }
    if overrides:
        config.update(overrides)
    return config


def create_app(config=None) -> Flask:
    """Build the application and its single ScheduleService."""
    app = Flask(__name__)
    app.config.update(load_config(config))

    store = ScheduleStore(app.config['DATA_DIR'])
    store.ensure_tiers()
    service = ScheduleService(
        store,
        fallback_policy=app.config['FALLBACK_POLICY'],
        no_match_message=app.config['NO_MATCH_MESSAGE'],
        schedule_url=lambda slug: url_for('schedule_page', slug=slug),
    )
    app.extensions['schedule_service'] = service
    app.logger.info(f"Serving schedules from {app.config['DATA_DIR']} "
                    f"(fallback policy: {app.config['FALLBACK_POLICY']})")

    @app.route('/')
    def index():
        """List published schedules."""
        schedules = [s for s in store.load_schedules() if s.is_published]
        return render_template('index.html', schedules=schedules)

    @app.route('/schedule/<slug>')
    def schedule_page(slug):
        """Full page for a single schedule."""
        schedule, body = service.render_schedule_page(slug, hide_old=is_truthy(request.args.get('hide_old')))
        if schedule is None:
            abort(404)
        return render_template('schedule_page.html', schedule=schedule, body=body)

    @app.route('/pages/<slug>')
    def content_page(slug):
        """Static page whose content may embed [schedule] shortcodes."""
        page = store.load_page(slug)
        if page is None:
            abort(404)
        return render_template('page.html', page=page, body=service.render_content(page.content))

    @app.route('/teams')
    def teams():
        """Teams grouped by tier, in tier order."""
        all_teams = store.load_teams()
        tier_names = store.load_tiers()
        grouped = {tier: [] for tier in tier_names}
        for team in sorted(all_teams.values(), key=lambda t: t.name.lower()):
            tier = team.tier if team.tier in grouped else UNASSIGNED_TIER
            grouped.setdefault(tier, []).append(resolve_team(team.id, all_teams))
        return render_template('teams.html', tiers=list(grouped.items()))

    @app.route('/api/schedule-html')
    def api_schedule_html():
        """Shortcode equivalent: schedule fragment for slug/hide_old/date query params."""
        html = service.render_schedule(
            request.args.get('slug', ''),
            hide_old=is_truthy(request.args.get('hide_old')),
            date=request.args.get('date', ''),
        )
        return Response(str(html), mimetype='text/html')

    @app.route('/api/schedules/<slug>/grid')
    def api_schedule_grid(slug):
        """Flattened grids for a schedule as JSON."""
        data = service.schedule_json(
            slug,
            hide_old=is_truthy(request.args.get('hide_old')),
            date=request.args.get('date', ''),
        )
        if data is None:
            return jsonify({'success': False, 'error': 'Schedule not found'}), 404
        return jsonify(data)

    @app.route('/api/schedules', methods=['POST'])
    def api_create_schedule():
        """Create a schedule with one prefilled matchday."""
        data = request.get_json(silent=True) or {}
        try:
            schedule = store.create_schedule(
                data.get('title'),
                slug=data.get('slug'),
                publish=is_truthy(data.get('publish', True)),
            )
        except ValueError as e:
            return jsonify({'success': False, 'error': str(e)}), 400
        except FileExistsError as e:
            return jsonify({'success': False, 'error': str(e)}), 409
        app.logger.info(f'Schedule created via API: {schedule.slug}')
        return jsonify({'success': True, 'schedule': schedule.to_dict()}), 201

    return app


# Served with `flask --app app:create_app run`; importing this module builds nothing.
if __name__ == '__main__':
    create_app().run(debug=True, port=5000)
