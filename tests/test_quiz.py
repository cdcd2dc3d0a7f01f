import asyncio
import json

import pytest

from career_bot.models import QuizSession
from career_bot.quiz import (
    QuizAnalysisError,
    QuizGenerationError,
    analysis_items,
    analyze,
    generate_quiz,
    parse_analysis,
    parse_questions,
    performance_label,
    record_answer,
)
from tests.fakes import FakeLLM, analysis_json, quiz_json, quiz_payload


def _answered(answers, correct=0):
    quiz = QuizSession(interested_domain="Data Science", questions=parse_questions(quiz_json(correct=correct)))
    for answer in answers:
        quiz = record_answer(quiz, answer)
    return quiz


def test_parse_questions_accepts_five_well_formed_questions():
    questions = parse_questions(quiz_json(correct=2))
    assert len(questions) == 5
    assert all(len(q.options) == 4 for q in questions)
    assert questions[0].correct_option == "Option 1C"


def test_parse_questions_rejects_four_questions():
    with pytest.raises(QuizGenerationError) as exc:
        parse_questions(quiz_json(count=4))
    assert str(exc.value) == "Could not generate a valid quiz. Please try a different domain."


def test_parse_questions_rejects_three_options():
    with pytest.raises(QuizGenerationError):
        parse_questions(quiz_json(options=3))


def test_parse_questions_rejects_duplicate_options():
    payload = quiz_payload()
    payload[2]["options"] = ["Same", "same", "Other", "Third"]
    with pytest.raises(QuizGenerationError):
        parse_questions(json.dumps(payload))


def test_parse_questions_rejects_out_of_range_answer():
    payload = quiz_payload()
    payload[0]["correctAnswerIndex"] = 4
    with pytest.raises(QuizGenerationError):
        parse_questions(json.dumps(payload))


def test_parse_questions_rejects_garbage():
    with pytest.raises(QuizGenerationError):
        parse_questions("Sure! Here is your quiz:")


def test_generate_quiz_asks_for_the_domain():
    llm = FakeLLM()
    questions = asyncio.run(generate_quiz("Data Science", llm))
    assert len(questions) == 5
    assert llm.called("generate_quiz") == [("Data Science",)]


def test_record_answer_advances_the_cursor():
    quiz = _answered([])
    assert quiz.current_question is quiz.questions[0]
    quiz = record_answer(quiz, 3)
    assert quiz.user_answers == (3,)
    assert quiz.current_question is quiz.questions[1]
    assert not quiz.is_complete


def test_record_answer_rejects_bad_index_and_complete_quiz():
    quiz = _answered([])
    with pytest.raises(ValueError):
        record_answer(quiz, 4)
    done = _answered([0, 0, 0, 0, 0])
    assert done.is_complete
    with pytest.raises(ValueError):
        record_answer(done, 0)


def test_analysis_items_pair_questions_with_answers():
    quiz = _answered([0, 1, 0, 2, 0])
    items = analysis_items(quiz)
    assert len(items) == 5
    assert items[1]["question"] == "Question 2 about the domain?"
    assert items[1]["correctAnswer"] == "Option 2A"
    assert items[1]["studentAnswer"] == "Option 2B"
    assert items[3]["studentAnswer"] == "Option 4C"


def test_analysis_items_require_a_complete_quiz():
    with pytest.raises(ValueError):
        analysis_items(_answered([0, 0]))


@pytest.mark.parametrize("score,label", [(5, "Good"), (4, "Good"), (3, "Medium"), (2, "Poor"), (0, "Poor")])
def test_performance_label(score, label):
    assert performance_label(score) == label


def test_four_correct_is_a_good_fit():
    quiz = _answered([0, 0, 0, 0, 1])
    verdict = asyncio.run(analyze(quiz, FakeLLM()))
    assert verdict.is_good_fit
    assert verdict.analysis.score == 4
    assert verdict.analysis.headline == "Your Score: 4/5 - Good Performance"


def test_three_correct_is_medium_and_not_a_good_fit():
    quiz = _answered([0, 0, 0, 1, 2])
    verdict = asyncio.run(analyze(quiz, FakeLLM()))
    assert not verdict.is_good_fit
    assert "Medium Performance" in verdict.analysis.headline
    assert [b.is_correct for b in verdict.analysis.question_breakdown] == [True, True, True, False, False]


def test_analysis_flags_follow_recorded_answers():
    quiz = _answered([0, 1, 1, 1, 1])
    items = analysis_items(quiz)
    raw = json.loads(analysis_json("Data Science", items))
    # the model claims everything was right
    for entry in raw["questionBreakdown"]:
        entry["isCorrect"] = True
    raw["headline"] = "Your Score: 5/5 - Good Performance"

    analysis = parse_analysis(json.dumps(raw), quiz)

    assert analysis.score == 1
    assert not analysis.is_good_fit
    assert analysis.headline == "Your Score: 1/5 - Poor Performance"


def test_matching_headline_is_kept():
    quiz = _answered([0, 0, 0, 1, 1])
    raw = analysis_json("Data Science", analysis_items(quiz), headline="Score 3/5 - medium performance overall")
    assert parse_analysis(raw, quiz).headline == "Score 3/5 - medium performance overall"


def test_short_breakdown_is_an_analysis_error():
    quiz = _answered([0, 0, 0, 0, 0])
    raw = json.loads(analysis_json("Data Science", analysis_items(quiz)))
    raw["questionBreakdown"] = raw["questionBreakdown"][:4]
    with pytest.raises(QuizAnalysisError):
        parse_analysis(json.dumps(raw), quiz)


def test_analyze_sends_domain_and_items():
    quiz = _answered([0, 0, 0, 0, 0])
    llm = FakeLLM()
    asyncio.run(analyze(quiz, llm))
    (domain, items), = llm.called("analyze_quiz")
    assert domain == "Data Science"
    assert items == analysis_items(quiz)
