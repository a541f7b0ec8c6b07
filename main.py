import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from memeitup import DEFAULT_CONFIG, MemeError, meme_it_up
from memeitup.errors import MissingFieldError
from memeitup.models import ErrorResponse, HealthResponse

# --- Environment & Config ---
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("memeitup.api")

# --- App Init ---
app = FastAPI(title="meme-it-up", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # adjust in prod
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing field or image outside the accepted bounds."},
    500: {"model": ErrorResponse, "description": "Unexpected failure; details are logged server side."},
}


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


# --- Meme Endpoint ---
@app.post(
    "/",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}, **ERROR_RESPONSES},
)
@app.post(
    "/meme",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}, **ERROR_RESPONSES},
)
async def meme_endpoint(
    topText: Optional[str] = Form(None),
    bottomText: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    """Caption an uploaded image and return it as PNG.

    ``topText`` and ``bottomText`` must both be present and non-empty, and
    ``image`` must be a non-empty file. Images outside the accepted bounds
    are rejected with a 400; any other failure is logged with a timestamp
    and reported as an opaque 500 carrying the same timestamp.
    """
    try:
        if not topText or not bottomText:
            raise MissingFieldError("must include topText and bottomText")
        raw_data = await image.read() if image else None
        if not raw_data:
            raise MissingFieldError("must include an image file")
        png_bytes = await asyncio.to_thread(meme_it_up, raw_data, topText, bottomText, DEFAULT_CONFIG)
    except MemeError as e:
        if e.kind.is_client_error:
            raise HTTPException(status_code=400, detail=f"Bad Request - {e.message}")
        raise _server_error()
    except Exception:
        raise _server_error()
    return Response(content=png_bytes, media_type="image/png")


def _server_error() -> HTTPException:
    # called from an except block; logger.exception picks up the active exception
    now = datetime.now(timezone.utc).isoformat()
    logger.exception("SERVER ERROR %s", now)
    return HTTPException(status_code=500, detail=f"Internal Server Error ({now})")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
