# engine.py
"""
Rule engine that turns symptom questionnaire answers into condition suggestions.
- Each Rule carries a fixed Suggestion record; the engine never synthesizes text.
- Rules are independent; several may fire for one answer set.
- Output is sorted by probability (descending) and capped at ENGINE["max_suggestions"].
- Safe handling of missing or malformed answers (rule simply does not fire).
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from config import ENGINE

logger = logging.getLogger(__name__)


class QuestionId(str, Enum):
    FEVER = "fever"
    PAIN = "pain"
    RESPIRATORY = "respiratory"
    SEVERITY = "severity"
    DURATION = "duration"
    DIGESTIVE = "digestive"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConditionKey(str, Enum):
    COLD_FLU = "cold_flu"
    GASTROENTERITIS = "gastroenteritis"
    TENSION_HEADACHE = "tension_headache"
    MIGRAINE = "migraine"
    ALLERGIC_REACTION = "allergic_reaction"
    GENERAL_EVALUATION = "general_evaluation"


# question -> answer shape ("single", "multiple" or "scale")
QUESTION_KINDS: Dict[QuestionId, str] = {
    QuestionId.FEVER: "single",
    QuestionId.PAIN: "multiple",
    QuestionId.RESPIRATORY: "multiple",
    QuestionId.SEVERITY: "scale",
    QuestionId.DURATION: "single",
    QuestionId.DIGESTIVE: "multiple",
}


@dataclass(frozen=True)
class Answer:
    question: QuestionId

    @property
    def value(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class ChoiceAnswer(Answer):
    label: str = ""

    @property
    def value(self) -> str:
        return self.label


@dataclass(frozen=True)
class MultiChoiceAnswer(Answer):
    labels: FrozenSet[str] = frozenset()

    @property
    def value(self) -> FrozenSet[str]:
        return self.labels


@dataclass(frozen=True)
class ScaleAnswer(Answer):
    scale: int = 0

    @property
    def value(self) -> int:
        return self.scale


@dataclass(frozen=True)
class Suggestion:
    key: ConditionKey
    condition: str
    probability: int          # static per rule, only used for ranking
    description: str
    severity: Severity
    category: str
    symptoms: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key.value,
            "condition": self.condition,
            "probability": self.probability,
            "description": self.description,
            "severity": self.severity.value,
            "category": self.category,
            "symptoms": list(self.symptoms),
            "recommendations": list(self.recommendations),
        }


AnswerSet = Dict[QuestionId, Answer]


def safe_num(x: Any) -> Optional[float]:
    """Convert input to float if possible; return None for empty/invalid."""
    try:
        if x is None or isinstance(x, bool):
            return None
        if isinstance(x, (int, float)):
            return float(x)
        s = str(x).strip()
        if s == "":
            return None
        return float(s)
    except (TypeError, ValueError):
        return None


def make_answer(question: Union[QuestionId, str], value: Any) -> Optional[Answer]:
    """Shape a raw form value into the Answer variant for its question; None when it cannot."""
    try:
        qid = QuestionId(question)
    except ValueError:
        return None
    kind = QUESTION_KINDS[qid]

    if value is None:
        return None
    if kind == "single":
        if isinstance(value, str):
            return ChoiceAnswer(qid, value)
        return None
    if kind == "multiple":
        if isinstance(value, str):
            return MultiChoiceAnswer(qid, frozenset([value]))
        try:
            return MultiChoiceAnswer(qid, frozenset(str(v) for v in value))
        except TypeError:
            return None
    num = safe_num(value)
    if num is None or not num.is_integer():
        return None
    return ScaleAnswer(qid, int(num))


def answers_from_mapping(raw: Mapping[Any, Any]) -> Tuple[Answer, ...]:
    """Convert a {question_id: value} mapping (form or JSON payload) into Answers."""
    out = []
    for key, value in raw.items():
        answer = make_answer(key, value)
        if answer is not None:
            out.append(answer)
    return tuple(out)


def index_answers(answers: Union[Iterable[Answer], Mapping[Any, Any], None]) -> AnswerSet:
    """Key answers by question; the last answer for a repeated question wins."""
    if answers is None:
        return {}
    if isinstance(answers, Mapping):
        answers = answers_from_mapping(answers)
    indexed: AnswerSet = {}
    for a in answers:
        if isinstance(a, Answer):
            indexed[a.question] = a
    return indexed


def selected(answers: AnswerSet, qid: QuestionId) -> FrozenSet[str]:
    a = answers.get(qid)
    if isinstance(a, MultiChoiceAnswer):
        return a.labels
    return frozenset()


def choice(answers: AnswerSet, qid: QuestionId) -> Optional[str]:
    a = answers.get(qid)
    if isinstance(a, ChoiceAnswer):
        return a.label
    return None


def scale(answers: AnswerSet, qid: QuestionId) -> Optional[float]:
    a = answers.get(qid)
    if isinstance(a, ScaleAnswer):
        return safe_num(a.scale)
    return None


def raw_text(answers: AnswerSet, qid: QuestionId) -> str:
    """Stringified raw value of an answer, or '' when unanswered."""
    a = answers.get(qid)
    if a is None:
        return ""
    return str(a.value)


@dataclass
class Rule:
    id: str
    description: str
    condition: Callable[[AnswerSet], bool]  # function(answers) -> bool
    suggestion: Suggestion

    def applies(self, answers: AnswerSet) -> bool:
        try:
            return bool(self.condition(answers))
        except Exception:
            logger.debug("Rule %s raised while evaluating; treated as not firing", self.id, exc_info=True)
            return False


@dataclass
class SuggestionEngine:
    rules: List[Rule] = field(default_factory=list)
    max_suggestions: int = ENGINE["max_suggestions"]

    def evaluate(self, answers) -> List[Suggestion]:
        indexed = index_answers(answers)
        fired_rules = []

        # specific rules only; R_FALLBACK is a candidate when none of them match
        for r in self.rules:
            if r.id != "R_FALLBACK" and r.applies(indexed):
                fired_rules.append(r)

        # no specific match
        if len(fired_rules) == 0:
            fallback = next((r for r in self.rules if r.id == "R_FALLBACK"), None)
            if fallback:
                fired_rules.append(fallback)

        logger.debug("Fired rules: %s", [r.id for r in fired_rules])

        # Stable sort keeps declaration order for equal probabilities
        fired_rules.sort(key=lambda r: -r.suggestion.probability)

        return [r.suggestion for r in fired_rules[: self.max_suggestions]]


# ---------- Rule definitions ----------
COLD_FLU_SIGNS = frozenset(["Cough", "Runny nose", "Sore throat"])
GASTRO_SIGNS = frozenset(["Nausea", "Vomiting", "Diarrhea"])
ALLERGY_SIGNS = frozenset(["Runny nose", "Sore throat"])


def make_symptom_rules() -> List[Rule]:
    rules: List[Rule] = []

    has_fever = lambda a: choice(a, QuestionId.FEVER) is not None and choice(a, QuestionId.FEVER) != "No fever"
    respiratory = lambda a: selected(a, QuestionId.RESPIRATORY)
    has_headache = lambda a: "Headache" in selected(a, QuestionId.PAIN)
    severity = lambda a: scale(a, QuestionId.SEVERITY)

    # ----- Viral upper respiratory infection -----
    rules.append(Rule(
        id="R_COLD_FLU",
        description="Any fever, or a cough / runny nose / sore throat.",
        condition=lambda a: has_fever(a) or bool(respiratory(a) & COLD_FLU_SIGNS),
        suggestion=Suggestion(
            key=ConditionKey.COLD_FLU,
            condition="Common Cold or Flu",
            probability=85,
            description="Viral upper respiratory infection commonly affecting the nose, throat, and airways.",
            severity=Severity.LOW,
            category="Respiratory",
            symptoms=("Fever", "Cough", "Runny nose", "Body aches"),
            recommendations=("Rest and fluids", "OTC pain relievers", "Throat lozenges", "Monitor symptoms"),
        ),
    ))

    # ----- Stomach bug -----
    rules.append(Rule(
        id="R_GASTROENTERITIS",
        description="Nausea, vomiting or diarrhea reported.",
        condition=lambda a: bool(selected(a, QuestionId.DIGESTIVE) & GASTRO_SIGNS),
        suggestion=Suggestion(
            key=ConditionKey.GASTROENTERITIS,
            condition="Gastroenteritis (Stomach Bug)",
            probability=75,
            description="Inflammation of the stomach and intestines, often caused by viral or bacterial infection.",
            severity=Severity.MEDIUM,
            category="Digestive",
            symptoms=("Nausea", "Vomiting", "Diarrhea", "Abdominal pain"),
            recommendations=("Stay hydrated", "BRAT diet", "Electrolyte replacement", "Avoid dairy"),
        ),
    ))

    # ----- Headache, any severity -----
    rules.append(Rule(
        id="R_TENSION_HEADACHE",
        description="Headache selected among pain types.",
        condition=has_headache,
        suggestion=Suggestion(
            key=ConditionKey.TENSION_HEADACHE,
            condition="Tension Headache",
            probability=70,
            description="Most common type of headache, often caused by stress, fatigue, or muscle tension.",
            severity=Severity.LOW,
            category="Neurological",
            symptoms=("Headache", "Neck tension", "Mild sensitivity to light"),
            recommendations=("Rest in dark room", "OTC pain relievers", "Hydration", "Stress management"),
        ),
    ))

    # ----- Headache with high overall severity -----
    rules.append(Rule(
        id="R_MIGRAINE",
        description="Headache with overall severity at or above the migraine threshold.",
        condition=lambda a: has_headache(a) and (
            severity(a) is not None and severity(a) >= ENGINE["migraine_severity_threshold"]
        ),
        suggestion=Suggestion(
            key=ConditionKey.MIGRAINE,
            condition="Migraine",
            probability=60,
            description="Intense headache disorder that can cause severe throbbing pain, often on one side of the head.",
            severity=Severity.HIGH,
            category="Neurological",
            symptoms=("Severe headache", "Nausea", "Light sensitivity", "Sound sensitivity"),
            recommendations=("Dark, quiet environment", "Cold compress", "Prescription medication", "Avoid triggers"),
        ),
    ))

    # ----- Allergy -----
    # The fever clause is a plain substring test on the raw answer text. Every
    # fever option ("No fever" included) contains "fever", so in practice only
    # an unanswered fever question lets this rule fire.
    rules.append(Rule(
        id="R_ALLERGIC_REACTION",
        description="Runny nose or sore throat without a fever answer mentioning 'fever'.",
        condition=lambda a: bool(respiratory(a) & ALLERGY_SIGNS) and "fever" not in raw_text(a, QuestionId.FEVER),
        suggestion=Suggestion(
            key=ConditionKey.ALLERGIC_REACTION,
            condition="Allergic Reaction",
            probability=65,
            description="Immune system response to allergens like pollen, dust, or certain foods.",
            severity=Severity.LOW,
            category="Immunological",
            symptoms=("Runny nose", "Sneezing", "Itchy eyes", "Congestion"),
            recommendations=("Antihistamines", "Avoid allergens", "Nasal saline rinse", "Monitor symptoms"),
        ),
    ))

    # ----- Final catch-all fallback (nothing else fired) -----
    rules.append(Rule(
        id="R_FALLBACK",
        description="Fallback rule when no specific rule matches.",
        condition=lambda a: True,
        suggestion=Suggestion(
            key=ConditionKey.GENERAL_EVALUATION,
            condition="General Symptoms Requiring Medical Evaluation",
            probability=50,
            description="Your symptoms require professional medical evaluation for accurate diagnosis.",
            severity=Severity.MEDIUM,
            category="General",
            symptoms=("Various symptoms reported",),
            recommendations=("Schedule medical appointment", "Monitor symptoms", "Keep symptom diary", "Stay hydrated"),
        ),
    ))

    return rules


def get_engine() -> SuggestionEngine:
    return SuggestionEngine(make_symptom_rules())


def generate_suggestions(answers) -> List[Suggestion]:
    """Evaluate an answer set (Answers or a {question_id: value} mapping) with the default rules."""
    return get_engine().evaluate(answers)
