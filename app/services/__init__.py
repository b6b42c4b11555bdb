"""Application services (answer generation for detected questions)."""
from app.services.answer_service import AnswerGenerationError, build_prompt, generate_answer

__all__ = ["AnswerGenerationError", "build_prompt", "generate_answer"]
