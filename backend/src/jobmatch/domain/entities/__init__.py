"""Domain Entities - Core business objects"""

from .application import Application, ApplicationAnswer, ApplicationNote, Interview
from .job import Job
from .notification import Notification
__all__ = ["Application", "ApplicationAnswer", "ApplicationNote", "Interview", "Job", "Notification"]
