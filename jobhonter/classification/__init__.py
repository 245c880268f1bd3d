"""Remote/location classification and compensation extraction."""

from .compensation import detect_job_type, extract_salary
from .location import LocationClassifier

__all__ = ["LocationClassifier", "extract_salary", "detect_job_type"]
