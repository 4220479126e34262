from .profile import Household, Profile
from .task import Task
from .integration import Integration
from .event import Event
from .habit import Habit
from .reminder import Reminder
from .nudge import Nudge

__all__ = [
    "Household",
    "Profile",
    "Task",
    "Integration",
    "Event",
    "Habit",
    "Reminder",
    "Nudge",
]
