__all__ = [
    "BootConfiguration",
    "di",
    "ExamflowContainer",
    "LoggingProvider",
    "Settings",
    "Secrets",
    "TimestampProvider",
]


from . import di
from .config import Secrets, Settings
from .container import BootConfiguration, ExamflowContainer
from .provider import LoggingProvider, TimestampProvider
