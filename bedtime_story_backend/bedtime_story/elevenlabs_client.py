import os, httpx, logging

logger = logging.getLogger(__name__)

TTS_MODEL_ID = "eleven_multilingual_v2"
OUTPUT_FORMAT = "mp3_44100_128"

def _voice_id() -> str:
    vid = os.getenv("ELEVENLABS_VOICE_ID", "")
    if not vid:
        raise RuntimeError("ELEVENLABS_VOICE_ID is not set; please configure your .env")
    return vid

def _headers():
    api_key = os.getenv("ELEVENLABS_API_KEY", "")
    if not api_key:
        raise RuntimeError("ELEVENLABS_API_KEY is not set; please configure your .env")
    return {
        "xi-api-key": api_key,
        "Content-Type": "application/json"
    }

async def tts_to_bytes(text: str) -> bytes:
    payload = {
        "text": text,
        "model_id": TTS_MODEL_ID,
        "voice_settings": {"stability": 0.5, "similarity_boost": 0.75}
    }
    url = f"https://api.elevenlabs.io/v1/text-to-speech/{_voice_id()}"
    logger.info(f"Requesting voiceover from ElevenLabs ({len(text)} chars)")

    async with httpx.AsyncClient(timeout=60) as client:
        r = await client.post(url, headers=_headers(), json=payload, params={"output_format": OUTPUT_FORMAT})
        if r.status_code >= 400:
            logger.error(f"ElevenLabs TTS failed {r.status_code}: {r.text}")
        r.raise_for_status()
        return r.content
