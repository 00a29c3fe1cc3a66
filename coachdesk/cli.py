import click

from coachdesk.auth import ROLE_ATHLETE, ROLE_COACH, issue_token
from coachdesk.extensions import db
from coachdesk.models import Athlete, Coach

DEMO_COACH_EMAIL = 'coach@example.com'


def register_commands(app):
    @app.cli.command('seed-demo')
    def seed_demo():
        """Create a demo coach with one athlete."""
        coach = Coach.query.filter_by(email=DEMO_COACH_EMAIL).first()
        if coach:
            click.echo(f"Coach '{DEMO_COACH_EMAIL}' already exists ({coach.id}).")
            return

        coach = Coach(name='Demo Coach', email=DEMO_COACH_EMAIL, brand_name='Demo Strength')
        db.session.add(coach)
        db.session.flush()
        athlete = Athlete(
            coach_id=coach.id,
            name='Demo Athlete',
            email='athlete@example.com',
            is_competitor=True,
        )
        db.session.add(athlete)
        db.session.commit()

        click.echo(f"Coach created: {coach.id}")
        click.echo(f"Athlete created: {athlete.id}")

    @app.cli.command('issue-token')
    @click.argument('role', type=click.Choice([ROLE_COACH, ROLE_ATHLETE]))
    @click.argument('subject_id')
    def issue_token_command(role, subject_id):
        """Print an access token for a coach or athlete id."""
        model = Coach if role == ROLE_COACH else Athlete
        if db.session.get(model, subject_id) is None:
            raise click.ClickException(f"No {role} with id {subject_id}")
        click.echo(issue_token(role, subject_id))
