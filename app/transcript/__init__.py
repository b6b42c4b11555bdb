"""Transcript handling: question detection, silence segmentation, session transcript persistence."""
from .models import AnswerState, AnswerStatus, ConversationTurn, Utterance
from .question import is_question, normalize_question_text
from .segmenter import TranscriptSegmenter
from .writer import TranscriptWriterBase, create_transcript_writer

__all__ = [
    "AnswerState",
    "AnswerStatus",
    "ConversationTurn",
    "TranscriptSegmenter",
    "TranscriptWriterBase",
    "Utterance",
    "create_transcript_writer",
    "is_question",
    "normalize_question_text",
]
