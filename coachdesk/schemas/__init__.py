from .base import apply_patch
from .athlete import AthleteSchema, AthleteUpdateSchema
from .coach import CoachSchema, SettingsSchema
from .exercise import ExerciseSchema
from .program import (
    AssignProgramSchema,
    ProgramSchema,
    ProgramUpdateSchema,
    TemplateSchema,
    WorkoutSchema,
)
from .meet import MeetCreateSchema, MeetEntryFieldsSchema, MeetEntrySchema, MeetSchema
from .logs import BodyweightLogSchema, BodyweightLogUpdateSchema, SetLogSchema, SetLogUpdateSchema
from .submission import SubmissionSchema

__all__ = [
    "apply_patch",
    "AthleteSchema", "AthleteUpdateSchema",
    "CoachSchema", "SettingsSchema",
    "ExerciseSchema",
    "AssignProgramSchema", "ProgramSchema", "ProgramUpdateSchema", "TemplateSchema", "WorkoutSchema",
    "MeetCreateSchema", "MeetEntryFieldsSchema", "MeetEntrySchema", "MeetSchema",
    "BodyweightLogSchema", "BodyweightLogUpdateSchema", "SetLogSchema", "SetLogUpdateSchema",
    "SubmissionSchema",
]
