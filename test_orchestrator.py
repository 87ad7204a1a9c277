import asyncio
import os

import pytest

from bedtime_story import orchestrator, storage
from bedtime_story.models import StoryRequest, ContinueRequest
from bedtime_story.orchestrator import GenerationError, is_concluding, segment_index_for
from bedtime_story.prompts import (
    DECISION_DIRECTIVE,
    CONCLUSION_DIRECTIVE,
    STORYTELLER_SYSTEM_PROMPT,
    CONTINUATION_SYSTEM_PROMPT,
)


def _story_request():
    return StoryRequest(genre="sci-fi", childGender="girl", theme="courage", age=8, artStyle="watercolor")


def _continue_request(count, user_input="Open the hatch"):
    return ContinueRequest(userInput=user_input, previousStory="Once upon a time...", inputCount=count)


def test_termination_policy():
    assert not is_concluding(0)
    assert not is_concluding(1)
    assert is_concluding(2)
    assert is_concluding(5)


def test_segment_index_follows_input_count():
    assert segment_index_for(0) == 1
    assert segment_index_for(2) == 3


def test_initial_story_uses_segment_zero(providers):
    resp = asyncio.run(orchestrator.run_initial_story(_story_request()))

    assert resp.story == providers.story_text.strip()
    assert resp.image == "generated/story_image_part_1.jpg"
    assert resp.audio_url == "generated/story_voice_part_1.mp3"
    assert resp.choices == ["1. Open the hatch", "2. Call mission control", "3. Take a nap"]
    assert "sci-fi genre" in providers.prompts()[0]
    assert "watercolor" in providers.prompts()[0]


@pytest.mark.parametrize("count", [0, 1])
def test_mid_story_continuation_offers_choices(providers, count):
    resp = asyncio.run(orchestrator.run_continuation(_continue_request(count)))

    assert providers.kinds() == ["text", "text", "image", "voice"]
    assert DECISION_DIRECTIVE in providers.prompts()[0]
    assert 0 < len(resp.choices) <= 3
    assert resp.image == f"generated/story_image_part_{count + 2}.jpg"
    assert resp.story.endswith("?\n\n")


@pytest.mark.parametrize("count", [2, 3])
def test_final_continuation_has_no_choices(providers, count):
    resp = asyncio.run(orchestrator.run_continuation(_continue_request(count)))

    assert resp.choices == []
    assert providers.kinds() == ["text", "image", "voice"]
    assert CONCLUSION_DIRECTIVE in providers.prompts()[0]
    assert resp.audio_url == f"generated/story_voice_part_{count + 2}.mp3"


def test_media_receive_segment_text_only(providers):
    asyncio.run(orchestrator.run_continuation(_continue_request(0)))

    image_prompt = next(c[1] for c in providers.calls if c[0] == "image")
    voice_text = next(c[1] for c in providers.calls if c[0] == "voice")
    assert "segment 2 of the story" in image_prompt
    assert "Once upon a time" not in image_prompt
    assert voice_text == providers.story_text.strip()


def test_continuation_prompt_carries_story_and_input(providers):
    asyncio.run(orchestrator.run_continuation(_continue_request(1, user_input="")))

    prompt = providers.prompts()[0]
    assert prompt.startswith("Once upon a time...")
    assert 'The user input is: "".' in prompt


def test_text_failure_skips_media(providers):
    providers.fail_text = True
    with pytest.raises(GenerationError):
        asyncio.run(orchestrator.run_continuation(_continue_request(0)))
    assert providers.kinds() == ["text"]


def test_image_failure_skips_voice(providers):
    providers.fail_image = True
    with pytest.raises(GenerationError):
        asyncio.run(orchestrator.run_initial_story(_story_request()))
    assert "voice" not in providers.kinds()


def test_malformed_choice_output_does_not_fail(providers):
    providers.choices_text = "Sure! Here are some ideas:\n\n" + " ".join(["long"] * 30)
    resp = asyncio.run(orchestrator.run_continuation(_continue_request(0)))
    assert resp.choices == ["1. Sure! Here are some ideas:"]


def test_choices_failure_skips_media(providers):
    providers.fail_choices = True
    with pytest.raises(GenerationError):
        asyncio.run(orchestrator.run_continuation(_continue_request(0)))
    assert providers.kinds() == ["text", "text"]


def test_voice_failure_aborts_and_leaves_image(providers):
    providers.fail_voice = True
    with pytest.raises(GenerationError):
        asyncio.run(orchestrator.run_continuation(_continue_request(0)))

    assert providers.kinds() == ["text", "text", "image", "voice"]
    assert os.listdir(storage.GENERATED_DIR) == ["story_image_part_2.jpg"]


def test_choices_use_continuation_system_prompt(providers):
    asyncio.run(orchestrator.run_initial_story(_story_request()))

    story_call, choices_call = [c for c in providers.calls if c[0] == "text"]
    assert story_call[3] == STORYTELLER_SYSTEM_PROMPT
    assert choices_call[3] == CONTINUATION_SYSTEM_PROMPT
