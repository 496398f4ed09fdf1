from esched.conflicts import evaluate, find_week_conflicts
from esched.model import ClassAssignment, ConflictReport, DayOfWeek, DeliveryMode, Directory
from esched.times import InvalidTimeFormat

__all__ = [
    "ClassAssignment",
    "ConflictReport",
    "DayOfWeek",
    "DeliveryMode",
    "Directory",
    "InvalidTimeFormat",
    "evaluate",
    "find_week_conflicts",
]
