from flask import jsonify

from coachdesk.errors import NotFoundError
from coachdesk.extensions import db
from coachdesk.models import Submission
from coachdesk.schemas import SubmissionSchema
from coachdesk.utils.helpers import commit_or_raise, get_json_body

from . import api_bp

submission_schema = SubmissionSchema()


@api_bp.route('/submissions', methods=['POST'])
def create_submission():
    data = submission_schema.load(get_json_body())
    submission = Submission(**data)
    db.session.add(submission)
    commit_or_raise('Failed to save submission')
    return jsonify({'id': submission.id}), 201


@api_bp.route('/submissions', methods=['GET'])
def list_submissions():
    submissions = Submission.query.order_by(Submission.created_at.desc()).all()
    return jsonify([s.to_dict() for s in submissions])


@api_bp.route('/submissions/<submission_id>', methods=['GET'])
def get_submission(submission_id):
    submission = db.session.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError('Submission not found')
    return jsonify(submission.to_dict(full=True))
