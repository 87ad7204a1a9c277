import os
import tempfile

# Point static/upload dirs at scratch space before the app settings are imported
_scratch = tempfile.mkdtemp(prefix="bedtime-story-tests-")
os.environ.setdefault("STATIC_DIR", os.path.join(_scratch, "public"))
os.environ.setdefault("UPLOAD_DIR", os.path.join(_scratch, "uploads"))

import pytest

from bedtime_story import orchestrator, storage


class FakeProviders:
    """Records every provider call and returns canned content."""

    def __init__(self):
        self.calls = []
        self.story_text = "  Luna climbed aboard the starship. What should she do next?  "
        self.choices_text = "1. Open the hatch\n\n2. Call mission control\n3. Take a nap"
        self.fail_text = False
        self.fail_choices = False
        self.fail_image = False
        self.fail_voice = False

    def complete(self, system_prompt, user_prompt, max_tokens):
        self.calls.append(("text", user_prompt, max_tokens, system_prompt))
        if self.fail_text:
            raise RuntimeError("OpenAI is down")
        if user_prompt.startswith("Based on the following"):
            if self.fail_choices:
                raise RuntimeError("OpenAI rate limited")
            return self.choices_text
        return self.story_text

    async def generate_image_bytes(self, prompt):
        self.calls.append(("image", prompt))
        if self.fail_image:
            raise RuntimeError("Replicate failed: failed")
        return b"\xff\xd8fake-jpeg"

    async def tts_to_bytes(self, text):
        self.calls.append(("voice", text))
        if self.fail_voice:
            raise RuntimeError("ElevenLabs TTS failed 500")
        return b"ID3fake-mp3"

    def kinds(self):
        return [c[0] for c in self.calls]

    def prompts(self):
        return [c[1] for c in self.calls if c[0] == "text"]


@pytest.fixture
def providers(monkeypatch, tmp_path):
    fake = FakeProviders()
    monkeypatch.setattr(orchestrator, "complete", fake.complete)
    monkeypatch.setattr(orchestrator, "generate_image_bytes", fake.generate_image_bytes)
    monkeypatch.setattr(orchestrator, "tts_to_bytes", fake.tts_to_bytes)
    monkeypatch.setattr(storage, "GENERATED_DIR", str(tmp_path / "generated"))
    return fake
