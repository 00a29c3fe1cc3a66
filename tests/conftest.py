"""Pytest configuration and fixtures."""

import pytest

from coachdesk import create_app
from coachdesk.auth import ROLE_ATHLETE, ROLE_COACH, issue_token
from coachdesk.extensions import db, scheduler
from coachdesk.models import Athlete, Coach, Exercise, Program, Workout, WorkoutExercise


@pytest.fixture
def app():
    """Application on the testing config with a fresh in-memory database."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def scheduled_jobs(monkeypatch):
    """Record background jobs instead of handing them to APScheduler."""
    jobs = []

    def add_job(**kwargs):
        jobs.append(kwargs)

    monkeypatch.setattr(scheduler, 'add_job', add_job)
    return jobs


@pytest.fixture
def make_coach(app):
    def _make(name='Coach Carter', email='carter@example.com', **kwargs):
        coach = Coach(name=name, email=email, **kwargs)
        db.session.add(coach)
        db.session.commit()
        return coach
    return _make


@pytest.fixture
def coach(make_coach):
    return make_coach()


@pytest.fixture
def make_athlete(app, coach):
    def _make(name='Jane Lifter', owner=None, **kwargs):
        kwargs.setdefault('email', f"{name.split(' ')[0].lower()}@example.com")
        athlete = Athlete(coach_id=(owner or coach).id, name=name, **kwargs)
        db.session.add(athlete)
        db.session.commit()
        return athlete
    return _make


@pytest.fixture
def athlete(make_athlete):
    return make_athlete()


@pytest.fixture
def exercise(app):
    """A global library exercise."""
    row = Exercise(name='Back Squat', category='squat', tags=['competition', 'lower'])
    db.session.add(row)
    db.session.commit()
    return row


@pytest.fixture
def make_program(app, coach, exercise):
    """Build a program from ``(week, day, name, [sets, ...])`` tuples."""
    def _make(layout, name='Block One', owner=None):
        program = Program(coach_id=(owner or coach).id, name=name)
        for week, day, workout_name, set_counts in layout:
            workout = Workout(name=workout_name, week_number=week, day_number=day)
            for position, sets in enumerate(set_counts):
                workout.exercises.append(WorkoutExercise(
                    exercise_id=exercise.id,
                    order=position,
                    prescribed_sets=str(sets),
                    prescribed_reps='5',
                    prescribed_load='225',
                ))
            program.workouts.append(workout)
        db.session.add(program)
        db.session.commit()
        return program
    return _make


@pytest.fixture
def coach_headers(coach):
    return {'Authorization': f'Bearer {issue_token(ROLE_COACH, coach.id)}'}


@pytest.fixture
def athlete_headers(athlete):
    return {'Authorization': f'Bearer {issue_token(ROLE_ATHLETE, athlete.id)}'}
