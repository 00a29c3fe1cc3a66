from flask import current_app, jsonify, request
from sqlalchemy import or_

from coachdesk.auth import coach_required
from coachdesk.errors import NotFoundError
from coachdesk.extensions import db
from coachdesk.models import (
    Athlete,
    Exercise,
    Program,
    ProgramAssignment,
    SetLog,
    Workout,
    WorkoutExercise,
    WorkoutSession,
)
from coachdesk.schemas import (
    AssignProgramSchema,
    ProgramSchema,
    ProgramUpdateSchema,
    TemplateSchema,
    apply_patch,
)
from coachdesk.services.notifications import schedule_assignment_notification
from coachdesk.services.scheduling import (
    DEFAULT_TRAINING_DAYS,
    cleanup_assignment_sessions,
    generate_schedule,
    persist_schedule,
)
from coachdesk.utils.helpers import LIKE_ESCAPE, commit_or_raise, contains_pattern, get_json_body, parse_bool
from coachdesk.utils.lookups import get_owned_athlete, get_owned_program

from . import api_bp

program_schema = ProgramSchema()
program_update_schema = ProgramUpdateSchema()
assign_schema = AssignProgramSchema()
template_schema = TemplateSchema()


def _check_exercises(coach_id, workouts):
    wanted = {ex['exercise_id'] for w in workouts for ex in w.get('exercises', [])}
    if not wanted:
        return
    found = {
        row.id for row in Exercise.query.filter(
            Exercise.id.in_(wanted),
            or_(Exercise.coach_id.is_(None), Exercise.coach_id == coach_id),
        )
    }
    missing = sorted(wanted - found)
    if missing:
        raise NotFoundError(f"Exercises not found: {', '.join(missing)}")


def _build_workouts(program, workouts):
    for workout_data in workouts:
        exercises = workout_data.pop('exercises', [])
        workout = Workout(**workout_data)
        for position, exercise_data in enumerate(exercises):
            exercise_data.setdefault('order', position)
            workout.exercises.append(WorkoutExercise(**exercise_data))
        program.workouts.append(workout)


@api_bp.route('/programs', methods=['GET'])
@coach_required
def list_programs(coach_id):
    query = Program.query.filter(Program.coach_id == coach_id)

    search = request.args.get('search', '').strip()
    if search:
        pattern = contains_pattern(search)
        query = query.filter(or_(
            Program.name.ilike(pattern, escape=LIKE_ESCAPE),
            Program.description.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    is_template = parse_bool(request.args.get('isTemplate'))
    if is_template is not None:
        query = query.filter(Program.is_template == is_template)

    program_type = request.args.get('type')
    if program_type:
        query = query.filter(Program.type == program_type)

    archived = request.args.get('archived')
    if archived is None:
        query = query.filter(Program.is_archived.is_(False))
    elif archived != 'all':
        query = query.filter(Program.is_archived == parse_bool(archived))

    programs = query.order_by(Program.updated_at.desc()).all()
    return jsonify([p.to_dict() for p in programs])


@api_bp.route('/programs', methods=['POST'])
@coach_required
def create_program(coach_id):
    data = program_schema.load(get_json_body())
    workouts = data.pop('workouts', [])
    _check_exercises(coach_id, workouts)

    program = Program(coach_id=coach_id, **data)
    _build_workouts(program, workouts)
    db.session.add(program)
    commit_or_raise('Failed to create program')
    return jsonify(program.to_dict(detail=True)), 201


@api_bp.route('/programs/<program_id>', methods=['GET'])
@coach_required
def get_program(program_id, coach_id):
    return jsonify(get_owned_program(coach_id, program_id).to_dict(detail=True))


@api_bp.route('/programs/<program_id>', methods=['PUT'])
@coach_required
def update_program(program_id, coach_id):
    program = get_owned_program(coach_id, program_id)
    data = program_update_schema.load(get_json_body(), partial=True)
    apply_patch(program, data)
    commit_or_raise('Failed to update program')
    return jsonify(program.to_dict(detail=True))


@api_bp.route('/programs/<program_id>', methods=['DELETE'])
@coach_required
def delete_program(program_id, coach_id):
    """Archive a program with history; hard-delete one that was never used."""
    program = get_owned_program(coach_id, program_id)

    has_logs = db.session.query(
        SetLog.query
        .join(WorkoutExercise, SetLog.workout_exercise_id == WorkoutExercise.id)
        .join(Workout, WorkoutExercise.workout_id == Workout.id)
        .filter(Workout.program_id == program.id)
        .exists()
    ).scalar()
    has_sessions = WorkoutSession.query.filter_by(program_id=program.id).count() > 0

    if program.assignments.count() or has_logs or has_sessions:
        program.is_archived = True
        commit_or_raise('Failed to archive program')
        return jsonify({'success': True, 'action': 'archived'})

    db.session.delete(program)
    commit_or_raise('Failed to delete program')
    return jsonify({'success': True, 'action': 'deleted'})


@api_bp.route('/programs/<program_id>/assign', methods=['POST'])
@coach_required
def assign_program(program_id, coach_id):
    """
    Assign a program to athletes, creating or updating one assignment per
    athlete. With a start date, the program's workouts are laid onto each
    athlete's calendar; dates that already hold a session are left alone.
    """
    data = assign_schema.load(get_json_body())
    program = get_owned_program(coach_id, program_id)

    athlete_ids = list(dict.fromkeys(data['athlete_ids']))
    found = {
        a.id for a in Athlete.query.filter(Athlete.id.in_(athlete_ids), Athlete.coach_id == coach_id)
    }
    missing = [a for a in athlete_ids if a not in found]
    if missing:
        raise NotFoundError(f"Athletes not found: {', '.join(missing)}")

    training_days = data.get('training_days') or DEFAULT_TRAINING_DAYS
    assignments = []
    created_ids = []
    schedules = {}

    for athlete_id in athlete_ids:
        assignment = ProgramAssignment.query.filter_by(program_id=program.id, athlete_id=athlete_id).first()
        if assignment is None:
            assignment = ProgramAssignment(
                program_id=program.id,
                athlete_id=athlete_id,
                start_date=data.get('start_date'),
                end_date=data.get('end_date'),
            )
            db.session.add(assignment)
            db.session.flush()
            created_ids.append(assignment.id)
        else:
            for key in ('start_date', 'end_date'):
                if key in data:
                    setattr(assignment, key, data[key])
            assignment.is_active = True
        assignments.append(assignment)

        if data.get('start_date'):
            schedule = generate_schedule(program.workouts, data['start_date'], training_days)
            schedules[athlete_id] = persist_schedule(athlete_id, program.id, assignment.id, schedule)

    commit_or_raise('Failed to assign program')

    for assignment_id in created_ids:
        schedule_assignment_notification(assignment_id)

    current_app.logger.info(f"Program {program.id} assigned to {len(assignments)} athletes")
    return jsonify({
        'programId': program.id,
        'assignments': [a.to_dict() for a in assignments],
        'count': len(assignments),
        'schedules': schedules,
    }), 201


@api_bp.route('/programs/<program_id>/assignments/<athlete_id>', methods=['DELETE'])
@coach_required
def unassign_program(program_id, athlete_id, coach_id):
    """Remove an assignment; future untouched sessions go, logged work stays."""
    program = get_owned_program(coach_id, program_id)
    get_owned_athlete(coach_id, athlete_id)

    assignment = ProgramAssignment.query.filter_by(program_id=program.id, athlete_id=athlete_id).first()
    if assignment is None:
        raise NotFoundError('Assignment not found')

    result = cleanup_assignment_sessions(assignment.id)
    WorkoutSession.query.filter_by(program_assignment_id=assignment.id).update(
        {WorkoutSession.program_assignment_id: None}, synchronize_session=False
    )
    db.session.delete(assignment)
    commit_or_raise('Failed to remove assignment')
    return jsonify({'success': True, **result})


@api_bp.route('/programs/<program_id>/template', methods=['POST'])
@coach_required
def save_as_template(program_id, coach_id):
    """Copy a program's structure into a reusable template without loads."""
    source = get_owned_program(coach_id, program_id)
    data = template_schema.load(request.get_json(silent=True) or {})

    template = Program(
        coach_id=coach_id,
        name=data.get('name') or f"{source.name} (Template)",
        description=source.description,
        type='template',
        periodization_type=source.periodization_type,
        is_template=True,
    )
    for workout in source.workouts:
        copy = Workout(
            name=workout.name,
            week_number=workout.week_number,
            day_number=workout.day_number,
            notes=workout.notes,
        )
        for exercise in workout.exercises:
            copy.exercises.append(WorkoutExercise(
                exercise_id=exercise.exercise_id,
                order=exercise.order,
                prescription_type=exercise.prescription_type,
                prescribed_sets=exercise.prescribed_sets,
                prescribed_reps=exercise.prescribed_reps,
                prescribed_load=None,
                prescribed_rpe=exercise.prescribed_rpe,
                prescribed_rir=exercise.prescribed_rir,
                velocity_target=exercise.velocity_target,
                percentage_of_1rm=exercise.percentage_of_1rm,
                superset_group=exercise.superset_group,
                superset_color=exercise.superset_color,
                is_unilateral=exercise.is_unilateral,
                rest_time_seconds=exercise.rest_time_seconds,
                tempo=exercise.tempo,
                notes=exercise.notes,
            ))
        template.workouts.append(copy)

    db.session.add(template)
    commit_or_raise('Failed to save template')
    return jsonify(template.to_dict(detail=True)), 201
