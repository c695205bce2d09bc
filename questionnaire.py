# questionnaire.py
"""
Six-step symptom questionnaire and the session state that walks through it.

The session is a plain object owned by the caller (the Streamlit app keeps one
in st.session_state). The engine only ever sees the immutable tuple returned
by QuestionnaireSession.answer_set().
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from config import UI
from engine import QUESTION_KINDS, Answer, MultiChoiceAnswer, QuestionId, make_answer

logger = logging.getLogger(__name__)

SCALE_MIN = 1
SCALE_MAX = 10


@dataclass(frozen=True)
class Question:
    id: QuestionId
    prompt: str
    category: str
    options: Tuple[str, ...] = ()

    @property
    def kind(self) -> str:
        return QUESTION_KINDS[self.id]


QUESTIONS: Tuple[Question, ...] = (
    Question(
        QuestionId.FEVER,
        "Are you experiencing fever?",
        "general",
        ("Yes, high fever (>101°F)", "Yes, mild fever (99-101°F)", "No fever"),
    ),
    Question(
        QuestionId.PAIN,
        "What type of pain are you experiencing?",
        "pain",
        ("Headache", "Body aches", "Chest pain", "Abdominal pain", "Joint pain", "No pain"),
    ),
    Question(
        QuestionId.RESPIRATORY,
        "Do you have any respiratory symptoms?",
        "respiratory",
        ("Cough", "Shortness of breath", "Sore throat", "Runny nose", "None"),
    ),
    Question(
        QuestionId.SEVERITY,
        "How severe are your symptoms overall? (1 = mild, 10 = severe)",
        "assessment",
    ),
    Question(
        QuestionId.DURATION,
        "How long have you been experiencing these symptoms?",
        "timeline",
        ("Less than 24 hours", "1-3 days", "4-7 days", "More than a week"),
    ),
    Question(
        QuestionId.DIGESTIVE,
        "Are you experiencing any digestive issues?",
        "digestive",
        ("Nausea", "Vomiting", "Diarrhea", "Loss of appetite", "None"),
    ),
)


def validate_answer(question: Question, value: Any) -> Answer:
    """Check a UI value against the question and shape it into an Answer.

    Raises ValueError for unknown options or out-of-range scale values.
    """
    if question.kind == "single":
        if value not in question.options:
            raise ValueError(f"{value!r} is not an option for '{question.id.value}'")
    elif question.kind == "multiple":
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ValueError(f"Expected a list of options for '{question.id.value}', got {value!r}")
        unknown = [v for v in value if v not in question.options]
        if unknown:
            raise ValueError(f"Unknown option(s) for '{question.id.value}': {', '.join(map(str, unknown))}")
    else:
        if isinstance(value, bool) or not isinstance(value, int) or not SCALE_MIN <= value <= SCALE_MAX:
            raise ValueError(f"Severity must be an integer between {SCALE_MIN} and {SCALE_MAX}, got {value!r}")

    answer = make_answer(question.id, value)
    if answer is None:
        raise ValueError(f"Could not read answer for '{question.id.value}': {value!r}")
    return answer


@dataclass
class QuestionnaireSession:
    questions: Tuple[Question, ...] = QUESTIONS
    current_step: int = 0
    answers: Dict[QuestionId, Answer] = field(default_factory=dict)
    feedback: Dict[str, int] = field(default_factory=dict)
    is_complete: bool = False

    @property
    def current_question(self) -> Question:
        return self.questions[self.current_step]

    @property
    def progress(self) -> float:
        return (self.current_step + 1) / len(self.questions) * 100

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(self.questions) - 1

    def answer(self, value: Any) -> Answer:
        """Record (or replace) the answer to the current question."""
        answer = validate_answer(self.current_question, value)
        self.answers[answer.question] = answer
        return answer

    def toggle(self, label: str) -> Answer:
        """Add or remove one label on the current multi-choice question."""
        question = self.current_question
        if question.kind != "multiple":
            raise ValueError(f"'{question.id.value}' is not a multi-choice question")
        current = self.answers.get(question.id)
        labels = set(current.labels) if isinstance(current, MultiChoiceAnswer) else set()
        labels ^= {label}
        # keep option order so the UI shows selections consistently
        return self.answer([o for o in question.options if o in labels])

    def current_answer(self) -> Optional[Any]:
        a = self.answers.get(self.current_question.id)
        return a.value if a is not None else None

    def is_answered(self) -> bool:
        return self.current_question.id in self.answers

    def next_step(self) -> bool:
        """Advance one question; returns True once the last question is done."""
        if not self.is_answered():
            raise ValueError(f"Question '{self.current_question.id.value}' has not been answered")
        if self.is_last_step:
            self.is_complete = True
        else:
            self.current_step += 1
        return self.is_complete

    def previous_step(self) -> None:
        if self.current_step > 0:
            self.current_step -= 1

    def restart(self) -> None:
        self.current_step = 0
        self.answers.clear()
        self.feedback.clear()
        self.is_complete = False

    def answer_set(self) -> Tuple[Answer, ...]:
        return tuple(self.answers.values())

    def rate(self, condition: str, stars: int) -> None:
        """Store a 1..N star rating for a suggested condition (session only)."""
        max_stars = UI["rating_stars"]
        if isinstance(stars, bool) or not isinstance(stars, int) or not 1 <= stars <= max_stars:
            raise ValueError(f"Rating must be between 1 and {max_stars}, got {stars!r}")
        self.feedback[condition] = stars
        logger.info("Feedback for %s: %d stars", condition, stars)
