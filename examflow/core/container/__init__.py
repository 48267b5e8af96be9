__all__ = [
    "BootConfiguration",
    "ExamflowContainer",
    "StorageContainer",
]

from .examflow import BootConfiguration, ExamflowContainer
from .storage import StorageContainer
