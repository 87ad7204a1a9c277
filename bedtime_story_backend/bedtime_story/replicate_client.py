import io, os, time, httpx, asyncio, logging
from PIL import Image
from .settings import REPLICATE_POLL_INTERVAL_MS, REPLICATE_POLL_TIMEOUT_S, REPLICATE_MODEL_VERSION

logger = logging.getLogger(__name__)

PREDICTIONS_URL = "https://api.replicate.com/v1/predictions"

def _headers():
    token = os.getenv("REPLICATE_API_TOKEN", "")
    if not token:
        raise RuntimeError("REPLICATE_API_TOKEN is not set; please configure your .env")
    return {"Authorization": f"Token {token}"}

def _model_selector() -> str:
    # Prefer explicit version from env for stability; fall back to a public model alias (latest).
    return REPLICATE_MODEL_VERSION or "black-forest-labs/flux-schnell"

def _parse_selector(selector: str):
    # ("model", {"owner", "name"}) for owner/name[:alias], otherwise ("version", {"version"})
    owner_name, _, _version_alias = selector.partition(":")
    if "/" in owner_name:
        owner, name = owner_name.split("/", 1)
        return "model", {"owner": owner, "name": name}
    return "version", {"version": selector}

async def _create_prediction(client: httpx.AsyncClient, prompt: str) -> str:
    selector = _model_selector()
    logger.info(f"Using Replicate model: {selector}")
    body = {"input": {"prompt": prompt, "num_outputs": 1, "aspect_ratio": "1:1"}}
    mode, data = _parse_selector(selector)
    if mode == "version":
        body["version"] = data["version"]
        url = PREDICTIONS_URL
    else:
        url = f"https://api.replicate.com/v1/models/{data['owner']}/{data['name']}/predictions"

    r = await client.post(url, headers={**_headers(), "Content-Type": "application/json"}, json=body)
    if r.status_code >= 400:
        logger.error(f"Replicate create failed {r.status_code}: {r.text}")
        raise RuntimeError(f"Replicate create failed {r.status_code}: {r.text}")
    pred_id = r.json()["id"]
    logger.info(f"Replicate prediction created with ID: {pred_id}")
    return pred_id

async def _wait_for_output(client: httpx.AsyncClient, pred_id: str) -> str:
    start = time.time()
    while True:
        s = await client.get(f"{PREDICTIONS_URL}/{pred_id}", headers=_headers())
        if s.status_code >= 400:
            logger.error(f"Replicate status failed {s.status_code}: {s.text}")
            raise RuntimeError(f"Replicate status failed {s.status_code}: {s.text}")
        body = s.json()
        status = body.get("status")
        logger.debug(f"Replicate prediction {pred_id} status: {status}")

        if status in ("succeeded", "failed", "canceled"):
            if status != "succeeded":
                logs = body.get("logs")
                error_detail = body.get("error")
                logger.error(f"Replicate failed: {status}. logs={logs} error={error_detail}")
                raise RuntimeError(f"Replicate failed: {status}. error={error_detail}")
            output = body.get("output")
            # Single-output models return a bare URL, multi-output ones a list
            if isinstance(output, list) and output:
                return output[0]
            if isinstance(output, str) and output:
                return output
            logger.error("Replicate succeeded but no output URL")
            raise RuntimeError("Replicate succeeded but no output URL")
        if time.time() - start > REPLICATE_POLL_TIMEOUT_S:
            logger.error("Replicate polling timeout")
            raise TimeoutError("Replicate polling timeout")
        await asyncio.sleep(REPLICATE_POLL_INTERVAL_MS / 1000.0)

async def create_and_wait_image(prompt: str) -> str:
    logger.info(f"Starting Replicate image generation for prompt: {prompt[:100]}...")
    async with httpx.AsyncClient(timeout=30) as client:
        pred_id = await _create_prediction(client, prompt)
        url = await _wait_for_output(client, pred_id)
    logger.info(f"Replicate prediction succeeded, got output URL: {url}")
    return url

def to_jpeg(image_data: bytes) -> bytes:
    """Re-encode provider output (usually WebP) as JPEG; JPEG input is returned untouched."""
    with Image.open(io.BytesIO(image_data)) as img:
        if img.format == "JPEG":
            return image_data
        if img.mode in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            img = background
        elif img.mode != "RGB":
            img = img.convert("RGB")
        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=92)
        return buffer.getvalue()

async def generate_image_bytes(prompt: str) -> bytes:
    url = await create_and_wait_image(prompt)
    async with httpx.AsyncClient(timeout=60) as client:
        img = await client.get(url)
        img.raise_for_status()
    try:
        return to_jpeg(img.content)
    except OSError as e:
        logger.warning(f"Image conversion failed: {e}, saving as-is")
        return img.content
