"""Interview session control: segmentation wired to per-turn answer generation."""
from .answers import AnswerTracker
from .session import InterviewSession

__all__ = ["AnswerTracker", "InterviewSession"]
