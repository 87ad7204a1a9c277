import os
import asyncio
import logging
from typing import Optional
from fastapi import FastAPI, HTTPException, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Ensure .env is loaded before importing modules that initialize API clients
from .settings import has_all_keys, ALLOWED_ORIGINS, STATIC_DIR, GENERATED_DIR
from .models import StoryRequest, ContinueRequest, SegmentResponse, TranscriptionResponse
from .orchestrator import run_initial_story, run_continuation, GenerationError
from .storage import save_upload, discard_upload
from .llm import transcribe

logger = logging.getLogger(__name__)

app = FastAPI(title="Bedtime Story Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)

@app.get("/health")
def health():
    keys_ok = has_all_keys()
    logger.info(f"Health check: API keys present = {keys_ok}")
    return {"ok": True, "has_keys": keys_ok}

@app.post("/generate-story", response_model=SegmentResponse)
async def generate_story(req: StoryRequest):
    logger.info(f"Generating {req.genre} story about {req.theme}")
    try:
        return await run_initial_story(req)
    except GenerationError as e:
        logger.error(f"Error generating story: {e.__cause__ or e}")
        raise HTTPException(500, "Error generating story")

@app.post("/continue-story", response_model=SegmentResponse)
async def continue_story(req: ContinueRequest):
    logger.info(f"Input count: {req.input_count}")
    try:
        return await run_continuation(req)
    except GenerationError as e:
        logger.error(f"Error generating story: {e.__cause__ or e}")
        raise HTTPException(500, "Error generating story")

@app.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe_audio(audio: Optional[UploadFile] = File(None)):
    if audio is None:
        raise HTTPException(400, "No file uploaded")
    path = save_upload(await audio.read())
    try:
        text = await asyncio.to_thread(transcribe, path)
    except Exception as e:
        # The upload is left in place for inspection
        logger.error(f"Error transcribing audio: {str(e)}")
        raise HTTPException(500, "Error transcribing audio")
    discard_upload(path)
    return TranscriptionResponse(transcription=text)

# Static files (frontend and generated/ artifacts); mounted last so API routes win
os.makedirs(GENERATED_DIR, exist_ok=True)
app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
