from .data.models import ReviewLog, StudyProgress  # noqa: F401
