import os, logging
from .settings import OPENAI_STORY_MODEL, OPENAI_TRANSCRIBE_MODEL

logger = logging.getLogger(__name__)

_client = None

def _get_client():
    global _client
    if _client is None:
        from openai import OpenAI
        api_key = os.getenv("OPENAI_API_KEY", "")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not set; please configure your .env")
        _client = OpenAI(api_key=api_key)
    return _client

def complete(system_prompt: str, user_prompt: str, max_tokens: int) -> str:
    logger.info(f"Calling OpenAI chat completion (max_tokens={max_tokens})")
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
    try:
        client = _get_client()
        resp = client.chat.completions.create(
            model=OPENAI_STORY_MODEL,
            messages=messages,
            max_tokens=max_tokens,
        )
        content = resp.choices[0].message.content
        if content is None:
            raise RuntimeError("OpenAI returned an empty completion")
        logger.info("Successfully received response from OpenAI")
        return content
    except Exception as e:
        logger.error(f"OpenAI API call failed: {str(e)}")
        raise

def transcribe(path: str) -> str:
    logger.info(f"Transcribing {os.path.basename(path)} with {OPENAI_TRANSCRIBE_MODEL}")
    try:
        client = _get_client()
        with open(path, "rb") as f:
            result = client.audio.transcriptions.create(
                file=f,
                model=OPENAI_TRANSCRIBE_MODEL,
            )
        return result.text
    except Exception as e:
        logger.error(f"OpenAI transcription failed: {str(e)}")
        raise
