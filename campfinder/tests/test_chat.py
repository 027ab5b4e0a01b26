from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

from campfinder.chat.intent import extract_preferences, merge_into_answers
from campfinder.chat.models import ExtractedPreferences
from campfinder.llm.config import LLMConfig
from campfinder.quiz.models import BudgetTier, QuizAnswers
from campfinder.recommendations.models import (
    DurationPreference,
    LocationType,
    ParentGoal,
    SpecialNeeds,
)

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)


def _mock_groq_response(payload: dict) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = json.dumps(payload)
    return response


# ── Extraction ───────────────────────────────────────────────────────────


class TestExtractPreferences:
    def test_fallback_when_disabled(self):
        extracted = extract_preferences("my son is 9", config=LLMConfig(enabled=False))
        assert extracted.confidence == 0.0
        assert extracted.missing_fields == ["child_age", "interests"]

    @patch("campfinder.llm.groq_client.Groq")
    def test_successful_extraction(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response({
            "child_name": "Aoife",
            "child_age": 9,
            "interests": ["stem"],
            "duration": "week",
            "confidence": 0.85,
            "missing_fields": ["budget_tier"],
        })

        extracted = extract_preferences(
            "Aoife is 9 and loves robots, a week would suit",
            allowed_interests=["stem", "arts"],
            config=ENABLED_CONFIG,
        )

        assert extracted.child_name == "Aoife"
        assert extracted.child_age == 9
        assert extracted.interests == ["stem"]
        assert extracted.confidence == 0.85

        messages = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0]["role"] == "system"
        assert "Allowed interest slugs: stem, arts" in messages[1]["content"]
        assert "loves robots" in messages[1]["content"]

    @patch("campfinder.llm.groq_client.Groq")
    def test_known_answers_are_sent(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            {"confidence": 0.5}
        )
        extract_preferences("she likes art", known=QuizAnswers(child_name="Aoife"), config=ENABLED_CONFIG)
        messages = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs["messages"]
        assert '"child_name": "Aoife"' in messages[1]["content"]

    @patch("campfinder.llm.groq_client.Groq")
    def test_fallback_on_api_error(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API error")
        extracted = extract_preferences("anything", config=ENABLED_CONFIG)
        assert extracted.confidence == 0.0

    @patch("campfinder.llm.groq_client.Groq")
    def test_fallback_on_bad_shape(self, mock_groq_cls):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            {"confidence": 7}
        )
        extracted = extract_preferences("anything", config=ENABLED_CONFIG)
        assert extracted.confidence == 0.0
        assert extracted.child_age is None


# ── Merging into quiz answers ────────────────────────────────────────────


class TestMergeIntoAnswers:
    def test_fills_empty_answers(self):
        extracted = ExtractedPreferences(
            child_name=" Sam ",
            child_age=10,
            parent_goals=["fun-adventure", "made-up"],
            interests=["stem", "juggling"],
            budget_tier="PREMIUM",
            duration="multi-week",
            location_type="local",
            county="Cork",
        )

        answers = merge_into_answers(QuizAnswers(), extracted, allowed_interests=["stem", "arts"])

        assert answers.child_name == "Sam"
        assert answers.child_age == 10
        assert answers.parent_goals == [ParentGoal.fun_adventure]
        assert answers.interests == ["stem"]
        assert answers.budget_tier is BudgetTier.premium
        assert answers.duration is DurationPreference.multi_week
        assert answers.location_preference.type is LocationType.local
        assert answers.location_preference.county == "Cork"

    def test_keeps_known_answers(self):
        known = QuizAnswers(
            child_name="Sam",
            child_age=10,
            parent_goals=[ParentGoal.social_connection],
            interests=["arts"],
            special_needs=SpecialNeeds(dietary=["Vegan"]),
        )
        extracted = ExtractedPreferences(
            parent_goals=["social-connection", "skill-development"],
            interests=["stem", "arts"],
            dietary=["Halal"],
            accessibility=["Ramps"],
        )

        answers = merge_into_answers(known, extracted)

        assert answers.child_name == "Sam"
        assert answers.child_age == 10
        assert answers.parent_goals == [ParentGoal.social_connection, ParentGoal.skill_development]
        assert answers.interests == ["arts", "stem"]
        assert answers.special_needs.dietary == ["Halal", "Vegan"]
        assert answers.special_needs.accessibility == ["Ramps"]

    def test_ignores_invalid_values(self):
        extracted = ExtractedPreferences(
            child_age=40,
            budget_tier="CHEAP",
            duration="fortnight",
            location_type="moon",
        )
        answers = merge_into_answers(QuizAnswers(), extracted)
        assert answers == QuizAnswers()

    def test_empty_extraction_is_a_no_op(self):
        known = QuizAnswers(child_name="Sam", interests=["arts"])
        assert merge_into_answers(known, ExtractedPreferences()) == known

    def test_short_name_is_ignored(self):
        answers = merge_into_answers(QuizAnswers(), ExtractedPreferences(child_name=" A "))
        assert answers.child_name is None

    def test_interests_stop_at_three(self):
        known = QuizAnswers(interests=["stem", "arts", "sports"])
        extracted = ExtractedPreferences(child_name="A", interests=["music", "drama"])

        answers = merge_into_answers(known, extracted)

        assert answers.interests == ["stem", "arts", "sports"]
        assert answers.child_name is None

    def test_new_interests_fill_up_to_three(self):
        known = QuizAnswers(interests=["stem"])
        extracted = ExtractedPreferences(interests=["arts", "music", "drama"])
        assert merge_into_answers(known, extracted).interests == ["stem", "arts", "music"]
