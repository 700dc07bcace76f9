from enum import Enum


class SubmissionState(str, Enum):
    """Progress of the single listing-creation call a wizard may make."""

    IDLE = "IDLE"
    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
