from .account import Profile, Role, SignupRequest, AdminSignupRequest, SignInRequest
from .subject import Subject, SubjectCreate
from .week import ContentItem, McqQuestion, ShortAnswerQuestion, Week, WeekCreate, WeekUpdate
from .progress import ProgressCreate, ProgressRecord, ProgressSummary, QuizSubmission, QuizResult

__all__ = [
    'Profile', 'Role', 'SignupRequest', 'AdminSignupRequest', 'SignInRequest',
    'Subject', 'SubjectCreate',
    'ContentItem', 'McqQuestion', 'ShortAnswerQuestion', 'Week', 'WeekCreate', 'WeekUpdate',
    'ProgressCreate', 'ProgressRecord', 'ProgressSummary', 'QuizSubmission', 'QuizResult',
]
