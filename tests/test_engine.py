from dataclasses import replace

from engine import (
    ChoiceAnswer,
    ConditionKey,
    MultiChoiceAnswer,
    QuestionId,
    Rule,
    ScaleAnswer,
    SuggestionEngine,
    answers_from_mapping,
    generate_suggestions,
    get_engine,
    make_symptom_rules,
)

FALLBACK = "General Symptoms Requiring Medical Evaluation"


def conditions(suggestions):
    return [(s.condition, s.probability) for s in suggestions]


def test_empty_answers_give_fallback_only():
    out = generate_suggestions([])
    assert conditions(out) == [(FALLBACK, 50)]
    assert out[0].key is ConditionKey.GENERAL_EVALUATION


def test_unmatched_answers_give_fallback_only():
    out = generate_suggestions({
        "fever": "No fever",
        "pain": ["No pain"],
        "respiratory": ["None"],
        "severity": 3,
        "duration": "1-3 days",
        "digestive": ["Loss of appetite"],
    })
    assert conditions(out) == [(FALLBACK, 50)]


def test_no_fever_with_cough_fires_cold_flu():
    out = generate_suggestions({"fever": "No fever", "respiratory": ["Cough"]})
    assert ("Common Cold or Flu", 85) in conditions(out)


def test_any_fever_fires_cold_flu():
    out = generate_suggestions({"fever": "Yes, mild fever (99-101°F)"})
    assert conditions(out) == [("Common Cold or Flu", 85)]


def test_headache_with_high_severity_adds_migraine():
    out = generate_suggestions({"pain": ["Headache"], "severity": 8})
    assert conditions(out) == [("Tension Headache", 70), ("Migraine", 60)]


def test_headache_below_threshold_is_tension_only():
    out = generate_suggestions({"pain": ["Headache"], "severity": 6})
    assert conditions(out) == [("Tension Headache", 70)]


def test_migraine_threshold_is_inclusive():
    out = generate_suggestions({"pain": ["Headache"], "severity": 7})
    assert ("Migraine", 60) in conditions(out)


def test_digestive_only_gives_gastroenteritis_alone():
    out = generate_suggestions({"digestive": ["Nausea", "Vomiting"]})
    assert conditions(out) == [("Gastroenteritis (Stomach Bug)", 75)]


def test_output_capped_at_three_and_sorted():
    out = generate_suggestions({
        "fever": "Yes, high fever (>101°F)",
        "pain": ["Headache"],
        "severity": 9,
        "digestive": ["Diarrhea"],
    })
    assert len(out) == 3
    assert conditions(out) == [
        ("Common Cold or Flu", 85),
        ("Gastroenteritis (Stomach Bug)", 75),
        ("Tension Headache", 70),
    ]
    probs = [s.probability for s in out]
    assert probs == sorted(probs, reverse=True)


def test_allergy_clause_never_fires_for_defined_fever_options():
    for fever in ("Yes, high fever (>101°F)", "Yes, mild fever (99-101°F)", "No fever"):
        out = generate_suggestions({"fever": fever, "respiratory": ["Runny nose"]})
        assert "Allergic Reaction" not in [s.condition for s in out]


def test_allergy_fires_when_fever_unanswered():
    out = generate_suggestions({"respiratory": ["Sore throat"]})
    assert conditions(out) == [("Common Cold or Flu", 85), ("Allergic Reaction", 65)]


def test_non_numeric_severity_does_not_match():
    answers = [
        MultiChoiceAnswer(QuestionId.PAIN, frozenset(["Headache"])),
        ScaleAnswer(QuestionId.SEVERITY, "very bad"),
    ]
    assert conditions(generate_suggestions(answers)) == [("Tension Headache", 70)]


def test_wrongly_shaped_answers_are_ignored():
    answers = [
        ChoiceAnswer(QuestionId.PAIN, "Headache"),
        MultiChoiceAnswer(QuestionId.FEVER, frozenset(["Yes, high fever (>101°F)"])),
        "not an answer",
        None,
    ]
    assert conditions(generate_suggestions(answers)) == [(FALLBACK, 50)]


def test_last_answer_for_a_question_wins():
    answers = [
        ChoiceAnswer(QuestionId.FEVER, "Yes, high fever (>101°F)"),
        ChoiceAnswer(QuestionId.FEVER, "No fever"),
    ]
    assert conditions(generate_suggestions(answers)) == [(FALLBACK, 50)]


def test_raising_rule_is_treated_as_not_firing():
    def boom(answers):
        raise RuntimeError("broken rule")

    rules = make_symptom_rules()
    rules.insert(0, Rule(id="R_BROKEN", description="always raises", condition=boom,
                         suggestion=rules[0].suggestion))
    out = SuggestionEngine(rules).evaluate([])
    assert conditions(out) == [(FALLBACK, 50)]


def test_ties_keep_declaration_order():
    rules = make_symptom_rules()
    first, second = rules[1], rules[2]
    always = lambda a: True
    engine = SuggestionEngine([
        Rule("A", "", always, second.suggestion),
        Rule("B", "", always, replace(first.suggestion, probability=70)),
    ])
    out = engine.evaluate([])
    assert [s.condition for s in out] == ["Tension Headache", "Gastroenteritis (Stomach Bug)"]


def test_engine_is_deterministic():
    answers = answers_from_mapping({"pain": ["Headache"], "severity": 8, "respiratory": ["Cough"]})
    engine = get_engine()
    assert engine.evaluate(answers) == engine.evaluate(answers)
    assert generate_suggestions(answers) == generate_suggestions(answers)


def test_answers_from_mapping_drops_unusable_values():
    answers = answers_from_mapping({
        "fever": 12,
        "severity": "high",
        "pain": "Headache",
        "unknown": "x",
        "duration": None,
    })
    assert answers == (MultiChoiceAnswer(QuestionId.PAIN, frozenset(["Headache"])),)


def test_answers_from_mapping_accepts_numeric_strings_for_scale():
    answers = answers_from_mapping({"severity": "8"})
    assert answers == (ScaleAnswer(QuestionId.SEVERITY, 8),)


def test_to_dict_shape():
    d = generate_suggestions({"digestive": ["Diarrhea"]})[0].to_dict()
    assert d["condition"] == "Gastroenteritis (Stomach Bug)"
    assert d["probability"] == 75
    assert d["severity"] == "medium"
    assert d["category"] == "Digestive"
    assert d["symptoms"] == ["Nausea", "Vomiting", "Diarrhea", "Abdominal pain"]
    assert d["recommendations"][0] == "Stay hydrated"
