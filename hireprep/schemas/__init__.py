from .prep import (
    ContinueResult,
    Difficulty,
    GenerateRequest,
    GenerationResult,
    PrepPlan,
    Question,
    SkillGapAnalysis,
)
from .storage import LastInput, SavedHistory, SavedInput

__all__ = [
    "Difficulty",
    "Question",
    "PrepPlan",
    "SkillGapAnalysis",
    "GenerationResult",
    "ContinueResult",
    "GenerateRequest",
    "SavedInput",
    "SavedHistory",
    "LastInput",
]
