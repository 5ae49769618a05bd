"""Lesson quizzes and daily reflections."""

from pydantic import BaseModel, Field, model_validator

from access_hub.config import DAILY_REFLECTION_PROMPT, DEFAULT_MODEL, LESSON_QUIZ_PROMPT
from access_hub.errors import ValidationError
from access_hub.llm import AIClients, generate_structured

# Stand-in entry when the user chooses to share nothing
SILENCE_ENTRY = "(the user chose silence today)"


class QuizQuestion(BaseModel):
    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=4, max_length=4)
    correct_answer_index: int = Field(ge=0, le=3)


class LessonQuiz(BaseModel):
    quiz: list[QuizQuestion] = Field(min_length=3, max_length=5)


class Reflection(BaseModel):
    reflection: str = Field(min_length=1)

    @model_validator(mode="after")
    def _not_blank(self):
        if not self.reflection.strip():
            raise ValueError("reflection is blank")
        return self


def generate_lesson_quiz(clients: AIClients, lesson_text: str, model: str = DEFAULT_MODEL) -> list[QuizQuestion]:
    """Create a 3-5 question multiple-choice quiz from lesson text."""
    if not lesson_text or not lesson_text.strip():
        raise ValidationError("Lesson text cannot be empty.")
    prompt = LESSON_QUIZ_PROMPT.format(lesson_text=lesson_text.strip())
    return generate_structured(clients, prompt, LessonQuiz, model).quiz


def daily_reflection(clients: AIClients, entry: str, model: str = DEFAULT_MODEL) -> str:
    """Offer a tentative, non-judgmental reflection on today's check-in.

    An empty entry is treated as silence, which is a valid check-in.
    """
    entry = (entry or "").strip() or SILENCE_ENTRY
    result = generate_structured(clients, DAILY_REFLECTION_PROMPT.format(entry=entry), Reflection, model)
    return result.reflection.strip()
