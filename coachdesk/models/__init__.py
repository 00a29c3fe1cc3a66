from .coach import Coach
from .athlete import Athlete
from .exercise import Exercise
from .program import Program, Workout, WorkoutExercise, ProgramAssignment
from .workout_session import WorkoutSession
from .set_log import SetLog
from .bodyweight_log import BodyweightLog
from .meet import CompetitionMeet, MeetEntry
from .conversation import Conversation
from .message import Message
from .submission import Submission

__all__ = [
    "Coach", "Athlete", "Exercise",
    "Program", "Workout", "WorkoutExercise", "ProgramAssignment",
    "WorkoutSession", "SetLog", "BodyweightLog",
    "CompetitionMeet", "MeetEntry",
    "Conversation", "Message", "Submission",
]
