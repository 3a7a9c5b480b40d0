from .enums import Role, Stage, ApplicationStatus, InterviewStatus
from .user import User
from .team import Team
from .system import System
from .cycle import ApplicationCycle, CycleStage
from .application import Application
from .availability import Availability
from .interview import Interview, InterviewNote
from .notification import Notification
from .event import Event, event_attendees
from .message import Message
