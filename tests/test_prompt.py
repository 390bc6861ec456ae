"""PromptManager tests — localized answer rendering and template output."""

import pytest
from jinja2.defaults import DEFAULT_FILTERS

from leak_intake.models.answers import (
    AnswerSet,
    BuildingType,
    LeakLocation,
    LeakSeverity,
    Symptom,
)
from leak_intake.prompt import PromptManager


@pytest.fixture
def prompts(catalog):
    return PromptManager(catalog)


def test_describe_answers_uses_labels(prompts):
    answers = AnswerSet(
        location=LeakLocation.CEILING,
        symptoms=frozenset({Symptom.MOLD, Symptom.DRIPPING}),
        building_type=BuildingType.APARTMENT,
        leak_severity=LeakSeverity.MEDIUM,
    )
    described = {item["label"]: item["value"] for item in prompts.describe_answers(answers)}

    assert described["Location of leak"] == "천장"
    # Declaration order, not selection order
    assert described["Reported symptoms"] == "물방울이 떨어진다, 곰팡이/냄새 발생"
    assert described["Building type"] == "아파트"


def test_unanswered_fields_render_placeholder(prompts):
    described = prompts.describe_answers(AnswerSet())
    assert len(described) == 8
    assert all(item["value"] == "미입력" for item in described)


def test_report_prompt(prompts):
    answers = AnswerSet(
        location=LeakLocation.WALL,
        symptoms=frozenset({Symptom.STAINED}),
        freeform_note="  비 오는 날만 젖어요  ",
    )
    text = prompts.render_report(answers, photo_count=3)

    assert "- Location of leak: 벽" in text
    assert "- Additional note from the user: 비 오는 날만 젖어요" in text
    assert "3 photos are attached" in text
    assert "High, Medium, Low" in text
    assert "question|red-flag answer|why it matters" in text
    assert "KOREAN" in text


def test_report_prompt_without_note(prompts):
    text = prompts.render_report(AnswerSet(), photo_count=1)
    assert "Additional note" not in text
    assert "1 photo is attached" in text


def test_relevance_prompt(prompts):
    text = prompts.render_relevance(2)
    assert "2 photos" in text
    assert '{"isRelevant": true}' in text


def test_environment_registers_no_custom_filters(prompts):
    assert prompts._env.filters == DEFAULT_FILTERS
