import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from openai import AsyncOpenAI

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

from routes.mix_route import router as mix_router  # noqa: E402
from routes.prompt_route import router as prompt_router  # noqa: E402


def _log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"


logging.basicConfig(level=_log_level())


def _cors_origins() -> list:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Attach an OpenAI async client to `app.state` for the relay routes.

    A client passed to `create_app` is used as-is and left open on shutdown.
    """
    owned = None
    if getattr(app.state, "openai_client", None) is None:
        if not os.getenv("OPENAI_API_KEY"):
            raise RuntimeError("OPENAI_API_KEY environment variable is not set")
        owned = AsyncOpenAI(timeout=float(os.getenv("OPENAI_TIMEOUT", "120")))
        app.state.openai_client = owned

    try:
        yield
    finally:
        # Injected clients belong to the caller
        if owned is not None:
            try:
                await owned.close()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logging.warning("Error while closing OpenAI client: %s", exc)
            app.state.openai_client = None


def create_app(openai_client: AsyncOpenAI | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        openai_client: Optional preconfigured client; when omitted the
            lifespan builds one from `OPENAI_API_KEY`.
    """
    app = FastAPI(title="Image Mixer Relay", lifespan=lifespan)
    app.state.openai_client = openai_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def status():
        """Liveness probe."""
        return {"status": "ok"}

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports whether the OpenAI client is present.
        """
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        return {"ok": True, "provider_available": has_openai}

    # Register application routers
    app.include_router(mix_router)
    app.include_router(prompt_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "3001")))
