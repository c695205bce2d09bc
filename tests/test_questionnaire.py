import pytest

from engine import ChoiceAnswer, MultiChoiceAnswer, QuestionId, ScaleAnswer, generate_suggestions
from questionnaire import QUESTIONS, QuestionnaireSession


def test_questions_are_in_fixed_order():
    assert [q.id for q in QUESTIONS] == [
        QuestionId.FEVER,
        QuestionId.PAIN,
        QuestionId.RESPIRATORY,
        QuestionId.SEVERITY,
        QuestionId.DURATION,
        QuestionId.DIGESTIVE,
    ]
    assert [q.kind for q in QUESTIONS] == ["single", "multiple", "multiple", "scale", "single", "multiple"]


def test_next_is_gated_on_answer():
    session = QuestionnaireSession()
    assert not session.is_answered()
    with pytest.raises(ValueError):
        session.next_step()
    session.answer("No fever")
    assert session.is_answered()
    assert session.next_step() is False
    assert session.current_step == 1


def test_full_walkthrough_feeds_engine():
    session = QuestionnaireSession()
    for value in ("No fever", ["Headache"], ["None"], 8, "1-3 days", ["None"]):
        session.answer(value)
        session.next_step()
    assert session.is_complete
    assert session.current_step == len(QUESTIONS) - 1

    out = generate_suggestions(session.answer_set())
    assert [s.condition for s in out] == ["Tension Headache", "Migraine"]


def test_answer_replaces_previous_value():
    session = QuestionnaireSession()
    session.answer("No fever")
    session.answer("Yes, high fever (>101°F)")
    assert session.current_answer() == "Yes, high fever (>101°F)"
    assert session.answer_set() == (ChoiceAnswer(QuestionId.FEVER, "Yes, high fever (>101°F)"),)


def test_invalid_answers_raise():
    session = QuestionnaireSession()
    with pytest.raises(ValueError):
        session.answer("Maybe")
    session.answer("No fever")
    session.next_step()
    with pytest.raises(ValueError):
        session.answer(["Headache", "Toothache"])
    session.current_step = 3
    for bad in (0, 11, 7.5, "8", True):
        with pytest.raises(ValueError):
            session.answer(bad)
    assert session.answer(10) == ScaleAnswer(QuestionId.SEVERITY, 10)


def test_toggle_adds_and_removes_labels():
    session = QuestionnaireSession(current_step=1)
    session.toggle("Joint pain")
    session.toggle("Headache")
    assert session.answers[QuestionId.PAIN] == MultiChoiceAnswer(QuestionId.PAIN, frozenset(["Headache", "Joint pain"]))
    session.toggle("Headache")
    assert session.current_answer() == frozenset(["Joint pain"])


def test_toggle_rejects_single_choice_question():
    session = QuestionnaireSession()
    with pytest.raises(ValueError):
        session.toggle("No fever")


def test_previous_step_stops_at_zero():
    session = QuestionnaireSession()
    session.previous_step()
    assert session.current_step == 0
    session.answer("No fever")
    session.next_step()
    session.previous_step()
    assert session.current_step == 0
    assert session.current_answer() == "No fever"


def test_progress():
    session = QuestionnaireSession()
    assert round(session.progress) == 17
    session.current_step = 5
    assert session.progress == 100


def test_restart_clears_everything():
    session = QuestionnaireSession()
    session.answer("No fever")
    session.next_step()
    session.rate("Tension Headache", 4)
    session.restart()
    assert session.current_step == 0
    assert session.answer_set() == ()
    assert session.feedback == {}
    assert not session.is_complete


def test_rating_bounds():
    session = QuestionnaireSession()
    session.rate("Migraine", 5)
    assert session.feedback == {"Migraine": 5}
    for bad in (0, 6, 3.5, True):
        with pytest.raises(ValueError):
            session.rate("Migraine", bad)
