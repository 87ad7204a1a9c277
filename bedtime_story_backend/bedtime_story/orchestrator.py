"""
Segment generation workflow.

Each request builds a `SegmentState` from the client-supplied fields and runs it
through a small LangGraph pipeline: story text, then (while the story is still
open) a fresh choice list, then the illustration, then the voiceover. Nothing
is kept between requests; the client resends the story so far and the number
of decisions it has made.
"""
import asyncio, logging
from langgraph.graph import StateGraph, END
from .models import SegmentState, StoryRequest, ContinueRequest, SegmentResponse
from .llm import complete
from .replicate_client import generate_image_bytes
from .elevenlabs_client import tts_to_bytes
from .storage import save_artifact
from .choices import normalize_choices
from .prompts import (
    STORYTELLER_SYSTEM_PROMPT,
    CONTINUATION_SYSTEM_PROMPT,
    build_story_prompt,
    build_continuation_prompt,
    build_choices_prompt,
    build_image_prompt,
)
from .settings import (
    STORY_MAX_DECISIONS,
    STORY_MAX_TOKENS,
    CONTINUATION_MAX_TOKENS,
    CHOICES_MAX_TOKENS,
    CHOICE_MAX_WORDS,
)

logger = logging.getLogger(__name__)

INITIAL_SEGMENT_INDEX = 0


class GenerationError(RuntimeError):
    """A text, image or voice generation step failed; the whole segment is abandoned."""


def is_concluding(input_count: int) -> bool:
    return input_count >= STORY_MAX_DECISIONS

def segment_index_for(input_count: int) -> int:
    return input_count + 1

async def node_narrate(state: SegmentState) -> dict:
    logger.info(f"Generating text for segment {state.segment_index}")
    text = await asyncio.to_thread(complete, state.system_prompt, state.user_prompt, state.max_tokens)
    return {"story_text": text.strip()}

def route_after_text(state: SegmentState) -> str:
    return "suggest_choices" if state.offer_choices else "illustrate"

async def node_suggest_choices(state: SegmentState) -> dict:
    logger.info(f"Generating choices for segment {state.segment_index}")
    prompt = build_choices_prompt(state.story_text, state.choices_label, CHOICE_MAX_WORDS)
    raw = await asyncio.to_thread(complete, CONTINUATION_SYSTEM_PROMPT, prompt, CHOICES_MAX_TOKENS)
    choices = normalize_choices(raw, max_words=CHOICE_MAX_WORDS)
    logger.info(f"Kept {len(choices)} choices for segment {state.segment_index}")
    return {"choices": choices}

async def node_illustrate(state: SegmentState) -> dict:
    logger.info(f"Requesting illustration for segment {state.segment_index}")
    data = await generate_image_bytes(build_image_prompt(state.story_text, state.segment_index))
    return {"image": save_artifact(data, state.segment_index, "image")}

async def node_voice_over(state: SegmentState) -> dict:
    logger.info(f"Requesting voiceover for segment {state.segment_index}")
    data = await tts_to_bytes(state.story_text)
    return {"audio_url": save_artifact(data, state.segment_index, "audio")}

def build_graph():
    g = StateGraph(SegmentState)
    g.add_node("narrate", node_narrate)
    g.add_node("suggest_choices", node_suggest_choices)
    g.add_node("illustrate", node_illustrate)
    g.add_node("voice_over", node_voice_over)
    g.set_entry_point("narrate")
    g.add_conditional_edges("narrate", route_after_text, {"suggest_choices": "suggest_choices", "illustrate": "illustrate"})
    g.add_edge("suggest_choices", "illustrate")
    g.add_edge("illustrate", "voice_over")
    g.add_edge("voice_over", END)
    return g.compile()

GRAPH = build_graph()

def _mk_initial_state(req: StoryRequest) -> SegmentState:
    return SegmentState(
        segment_index=INITIAL_SEGMENT_INDEX,
        system_prompt=STORYTELLER_SYSTEM_PROMPT,
        user_prompt=build_story_prompt(req),
        max_tokens=STORY_MAX_TOKENS,
        offer_choices=True,
        choices_label="story",
    )

def _mk_continuation_state(req: ContinueRequest) -> SegmentState:
    # Calls past the conclusion are not rejected; they yield another ending
    concluding = is_concluding(req.input_count)
    return SegmentState(
        segment_index=segment_index_for(req.input_count),
        system_prompt=CONTINUATION_SYSTEM_PROMPT,
        user_prompt=build_continuation_prompt(req, concluding),
        max_tokens=CONTINUATION_MAX_TOKENS,
        offer_choices=not concluding,
        choices_label="continuation",
    )

async def run_pipeline(state: SegmentState) -> SegmentState:
    logger.info(f"Starting pipeline for segment {state.segment_index} (choices={state.offer_choices})")
    try:
        final_state = await GRAPH.ainvoke(state)
    except Exception as e:
        logger.error(f"Pipeline failed for segment {state.segment_index}: {str(e)}")
        raise GenerationError(f"segment {state.segment_index} generation failed") from e

    # LangGraph hands back the channel values as a dict
    if isinstance(final_state, SegmentState):
        return final_state
    return SegmentState.model_validate(dict(final_state))

async def run_initial_story(req: StoryRequest) -> SegmentResponse:
    state = await run_pipeline(_mk_initial_state(req))
    return SegmentResponse(
        story=state.story_text,
        choices=state.choices,
        image=state.image,
        audio_url=state.audio_url,
    )

async def run_continuation(req: ContinueRequest) -> SegmentResponse:
    logger.info(f"Continuing story after {req.input_count} decisions")
    state = await run_pipeline(_mk_continuation_state(req))
    return SegmentResponse(
        story=state.story_text + "\n\n",
        choices=state.choices,
        image=state.image,
        audio_url=state.audio_url,
    )
