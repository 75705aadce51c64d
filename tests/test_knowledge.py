import pytest
from pydantic import ValidationError

from pulse_assistant.services.knowledge_service import (
    UnsupportedLanguageError,
    load_language,
    supported_languages,
)


def test_supported_languages():
    assert supported_languages() == ("en", "ar")


def test_load_language_is_idempotent():
    first = load_language("en")
    second = load_language("en")
    assert first is second
    assert first.model_dump() == second.model_dump()


def test_unsupported_language_raises():
    with pytest.raises(UnsupportedLanguageError) as info:
        load_language("fr")
    assert info.value.language == "fr"
    assert isinstance(info.value, ValueError)


def test_languages_share_intent_order(kb_en, kb_ar):
    assert kb_en.intent_names == kb_ar.intent_names
    assert kb_en.intent_names[0] == "greeting"
    assert "help" in kb_en.intent_names


def test_help_intent_answers_with_clarification(kb_en, kb_ar):
    for kb in (kb_en, kb_ar):
        templates = kb.intent("help").response_templates
        assert [t.text for t in templates] == [kb.clarification]
        assert all(t.actions == () for t in templates)


def test_every_action_token_has_label_and_acknowledgement(kb_en, kb_ar):
    for kb in (kb_en, kb_ar):
        labels = dict(kb.action_labels)
        acks = dict(kb.acknowledgements)
        for intent in kb.intents:
            for template in intent.response_templates:
                for action in template.actions:
                    assert action.label == labels[action.token]
                    assert action.token in acks


def test_patterns_are_lowercase(kb_en):
    for intent in kb_en.intents:
        assert all(p == p.lower() for p in intent.match_patterns)


def test_suggestion_sets(kb_ar):
    assert len(kb_ar.suggestions.first_time) == 4
    assert len(kb_ar.suggestions.returning) == 4
    assert kb_ar.suggestions.first_time[0].related_intent == "donation"


def test_knowledge_base_is_frozen(kb_en):
    with pytest.raises(ValidationError):
        kb_en.clarification = "changed"


def test_unknown_token_gets_default_acknowledgement(kb_en):
    assert kb_en.acknowledgement_for("nope") == kb_en.default_acknowledgement
    assert kb_en.label_for("nope") is None
