from .tag_detector import (
    JobDetection,
    ResumeDetection,
    detect_job_profile,
    detect_resume_profile,
)

__all__ = [
    "ResumeDetection",
    "JobDetection",
    "detect_resume_profile",
    "detect_job_profile",
]
