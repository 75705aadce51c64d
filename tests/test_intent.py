import pytest

from pulse_assistant.config import AssistantTuning
from pulse_assistant.models.schemas import Intent, KnowledgeBase, ResponseTemplate, SuggestionSets
from pulse_assistant.services.intent_service import recognize, score_pattern


def _kb(*intents):
    return KnowledgeBase(
        language="en",
        greetings=("hi",),
        intents=intents,
        suggestions=SuggestionSets(first_time=(), returning=()),
        clarification="?",
        suggestion_prompt="",
        returning_prompt="",
        followup_prompt="",
        default_acknowledgement="ok",
    )


def _intent(name, *patterns):
    return Intent(
        name=name,
        match_patterns=patterns,
        response_templates=(ResponseTemplate(text=name, base_confidence=1.0),),
    )


def test_donation_scenario(kb_en):
    result = recognize("I want to donate", kb_en)
    assert result.intent_name == "donation"
    assert result.confidence == pytest.approx(0.8 + (6 / 16) * 0.2)


def test_gibberish_falls_back_to_help(kb_en):
    result = recognize("xyz123 random gibberish", kb_en)
    assert result.intent_name == "help"
    assert result.confidence == 0.1


def test_empty_text_is_a_normal_no_match(kb_en):
    assert recognize("", kb_en).intent_name == "help"
    assert recognize("   ", kb_en).confidence == 0.1


def test_matching_is_case_insensitive(kb_en):
    assert recognize("DONATE NOW", kb_en).intent_name == "donation"


def test_arabic_input(kb_ar):
    result = recognize("أريد أن أتبرع", kb_ar)
    assert result.intent_name == "donation"
    assert result.confidence >= 0.8


def test_english_patterns_work_in_arabic_knowledge(kb_ar):
    assert recognize("show me the store", kb_ar).intent_name == "shopping"


def test_longest_coverage_wins(kb_en):
    # "payment" covers more of the input than "pay"
    assert recognize("payment", kb_en).confidence == pytest.approx(1.0)


def test_tie_keeps_first_intent():
    kb = _kb(_intent("first", "abc"), _intent("second", "xyz"))
    result = recognize("abc xyz", kb)
    assert result.intent_name == "first"


def test_confidence_is_clamped():
    tuning = AssistantTuning(match_floor=0.95, match_span=0.2)
    kb = _kb(_intent("only", "donate"))
    result = recognize("donate", kb, tuning)
    assert result.confidence == 1.0
    assert score_pattern("donate", "donate", tuning) == 1.0


def test_score_pattern_on_empty_text():
    assert score_pattern("abc", "") == 0.0


@pytest.mark.parametrize("text", [
    "hello",
    "How can I donate?",
    "what products are available",
    "track my order please",
    "I need help with payment",
    "مرحبا",
    "كيف تعمل الشفافية؟",
    "?",
    "a" * 500,
])
def test_results_stay_in_range(kb_en, text):
    result = recognize(text, kb_en)
    assert 0.0 <= result.confidence <= 1.0
    assert result.intent_name in kb_en.intent_names


@pytest.mark.parametrize("text", ["please donate", "open the store", "transparency report"])
def test_substring_match_is_at_least_floor(kb_en, text):
    assert recognize(text, kb_en).confidence >= 0.8


def test_score_uses_the_unstripped_length(kb_en):
    result = recognize("  donate  ", kb_en)
    assert result.intent_name == "donation"
    assert result.confidence == pytest.approx(0.8 + (6 / 10) * 0.2)
