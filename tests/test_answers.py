import pytest

from formportal.db.models.question import Question, QuestionType
from formportal.utils.answers import (
    normalize_answers,
    validate_answers,
    missing_required,
    validate_question,
    normalize_options,
)

OPTS = [{"id": "a", "label": "Yes", "value": "yes"}, {"id": "b", "label": "No", "value": "no"}]


def _question(qid, qtype, label="Q", required=False, options=None) -> Question:
    q = Question(id=qid, section_id="s", type=qtype, label=label, required=required, order=0)
    q.options = options
    return q


@pytest.mark.parametrize("qtype,value", [
    (QuestionType.TEXT, "hello"),
    (QuestionType.TEXTAREA, "multi\nline"),
    (QuestionType.EMAIL, "a@b.co"),
    (QuestionType.PHONE, "+91 98765-43210"),
    (QuestionType.NUMBER, "12.5"),
    (QuestionType.NUMBER, 7),
    (QuestionType.DATE, "2026-01-31"),
    (QuestionType.MCQ, "yes"),
    (QuestionType.DROPDOWN, "no"),
    (QuestionType.CHECKBOX, ["yes", "no"]),
])
def test_accepts_valid_values(qtype, value):
    q = _question("q", qtype, options=OPTS)
    assert validate_answers([q], [{"questionId": "q", "value": value}]) == []


@pytest.mark.parametrize("qtype,value", [
    (QuestionType.TEXT, 12),
    (QuestionType.EMAIL, "not-an-email"),
    (QuestionType.PHONE, "call me"),
    (QuestionType.NUMBER, "twelve"),
    (QuestionType.NUMBER, True),
    (QuestionType.DATE, "31/01/2026"),
    (QuestionType.DATE, "2024-1-5"),
    (QuestionType.DATE, "2026-02-30"),
    (QuestionType.PHONE, "-------"),
    (QuestionType.PHONE, "( ) ( ) ("),
    (QuestionType.EMAIL, "asha@bank..com"),
    (QuestionType.MCQ, "maybe"),
    (QuestionType.CHECKBOX, "yes"),
    (QuestionType.CHECKBOX, ["yes", "maybe"]),
])
def test_rejects_invalid_values(qtype, value):
    q = _question("q", qtype, label="Field", options=OPTS)
    errors = validate_answers([q], [{"questionId": "q", "value": value}])
    assert len(errors) == 1
    assert "'Field'" in errors[0]


def test_empty_values_pass_during_autosave():
    qs = [_question("q1", QuestionType.NUMBER, required=True), _question("q2", QuestionType.CHECKBOX, options=OPTS)]
    answers = [{"questionId": "q1", "value": ""}, {"questionId": "q2", "value": []}]
    assert validate_answers(qs, answers) == []


def test_unknown_question_ids_are_ignored():
    assert validate_answers([], [{"questionId": "ghost", "value": 42}]) == []


def test_normalize_keeps_last_answer_per_question():
    answers, errors = normalize_answers([
        {"questionId": "q1", "value": "first"},
        {"questionId": "q2", "value": "x"},
        {"questionId": "q1", "value": "second"},
    ])
    assert errors == []
    assert answers == [{"questionId": "q1", "value": "second"}, {"questionId": "q2", "value": "x"}]


def test_normalize_reports_bad_entries():
    answers, errors = normalize_answers([{"value": "orphan"}, "junk", {"questionId": "q1"}])
    assert answers == [{"questionId": "q1", "value": None}]
    assert errors == ["responses[0] must have a questionId.", "responses[1] must have a questionId."]

    assert normalize_answers({"questionId": "q1"}) == ([], ["responses must be a list."])


def test_missing_required_lists_labels():
    qs = [
        _question("q1", QuestionType.TEXT, label="Name", required=True),
        _question("q2", QuestionType.TEXT, label="Nickname"),
        _question("q3", QuestionType.CHECKBOX, label="Riders", required=True, options=OPTS),
    ]
    assert missing_required(qs, [{"questionId": "q1", "value": "Asha"}, {"questionId": "q3", "value": []}]) == ["Riders"]
    assert missing_required(qs, [{"questionId": "q1", "value": "Asha"}, {"questionId": "q3", "value": ["yes"]}]) == []


class TestQuestionDefinition:

    def test_choice_types_need_options(self):
        for qtype in (QuestionType.MCQ, QuestionType.CHECKBOX, QuestionType.DROPDOWN):
            assert validate_question(qtype, None)
            assert validate_question(qtype, [])

    def test_free_types_need_none(self):
        assert validate_question(QuestionType.TEXT, None) == []

    def test_option_shape_and_uniqueness(self):
        errors = validate_question(QuestionType.MCQ, [
            {"label": "A", "value": "a"},
            {"label": "", "value": "b"},
            {"label": "C", "value": "a"},
        ])
        assert errors == ["options[1] needs a label and a value.", "Duplicate option value 'a'."]

    def test_normalize_options_fills_ids(self):
        out = normalize_options([{"label": "A", "value": "a"}, {"id": "keep", "label": "B", "value": "b"}])
        assert out[0]["id"]
        assert out[1]["id"] == "keep"
        assert normalize_options(None) is None
