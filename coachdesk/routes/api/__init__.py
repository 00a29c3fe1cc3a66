from flask import Blueprint

api_bp = Blueprint('api', __name__)

from . import coaches, athletes, exercises, programs, meets, bodyweight, sets
from . import messages, schedule, analytics, settings, submissions
