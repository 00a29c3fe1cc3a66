from flask import Blueprint

athlete_bp = Blueprint('athlete', __name__)

from . import messages, calendar, profile, training, progress
