import os, uuid, logging
from .settings import GENERATED_DIR, GENERATED_SUBDIR, UPLOAD_DIR

logger = logging.getLogger(__name__)

ARTIFACT_FILENAMES = {
    "image": "story_image_part_{part}.jpg",
    "audio": "story_voice_part_{part}.mp3",
}

def write_bytes(path: str, data: bytes):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)

def artifact_filename(segment_index: int, kind: str) -> str:
    try:
        template = ARTIFACT_FILENAMES[kind]
    except KeyError:
        raise ValueError(f"unknown artifact kind: {kind!r}")
    # Part numbers on disk are 1-based: segment 0 -> part 1
    return template.format(part=segment_index + 1)

def save_artifact(data: bytes, segment_index: int, kind: str) -> str:
    """Write an artifact for a segment and return its path relative to the static root.

    An existing file for the same segment and kind is overwritten.
    """
    name = artifact_filename(segment_index, kind)
    path = os.path.join(GENERATED_DIR, name)
    write_bytes(path, data)
    logger.info(f"Saved {kind} for segment {segment_index} to {path}")
    return f"{GENERATED_SUBDIR}/{name}"

def save_upload(data: bytes, field_name: str = "audio", suffix: str = ".webm") -> str:
    path = os.path.join(UPLOAD_DIR, f"{field_name}-{uuid.uuid4().hex}{suffix}")
    write_bytes(path, data)
    logger.info(f"Stored upload at {path}")
    return path

def discard_upload(path: str):
    os.remove(path)
    logger.info(f"Removed upload {path}")
