import inspect
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
from fastapi import FastAPI, Request
from openai import AsyncOpenAI

from routes.chat_route import router as chat_router
from routes.identify_route import router as identify_router
from routes.session_route import router as session_router
from services.chat_orchestrator import ChatOrchestrator
from services.identification_orchestrator import IdentificationOrchestrator
from services.openai.care_advisor import CareProfileFetcher
from services.openai.chat_client import PlantChatClient
from services.openai.vision_identifier import VisionIdentifier
from services.plantnet.identification_client import PlantNetClient
from services.session_store import SessionStore
from utils.app_config import AppConfig


def attach_services(app: FastAPI, config: AppConfig, http_client: httpx.AsyncClient, openai_client: Optional[AsyncOpenAI]) -> None:
    """Wire clients and orchestrators onto `app.state` according to the configured credentials."""
    primary = None
    if config.plantnet_enabled:
        primary = PlantNetClient(http_client, config.plantnet_api_key, project=config.plantnet_project)

    secondary = None
    chat_client = None
    if openai_client is not None:
        secondary = VisionIdentifier(openai_client, model=config.openai_model)
        chat_client = PlantChatClient(openai_client, model=config.openai_model)

    app.state.config = config
    app.state.http_client = http_client
    app.state.openai_client = openai_client
    app.state.session_store = SessionStore()
    app.state.identification_orchestrator = IdentificationOrchestrator(
        care_fetcher=CareProfileFetcher(openai_client, model=config.openai_model),
        primary=primary,
        secondary=secondary,
    )
    app.state.chat_orchestrator = ChatOrchestrator(chat_client)


async def _close_quietly(client: Any) -> None:
    """Close a client exposing a sync or async close/aclose method."""
    if client is None:
        return
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception as exc:
        logging.warning("Error while closing %s: %s", type(client).__name__, exc)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    config = config or AppConfig.from_env()
    logging.basicConfig(level=config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - the shared httpx client used for Pl@ntNet
          - the OpenAI async client, when a key is configured
          - the session store and both orchestrators
        and attach them to `app.state`.
        """
        timeout = httpx.Timeout(config.request_timeout)
        http_client = httpx.AsyncClient(timeout=timeout)

        openai_client = None
        if config.openai_enabled:
            # Retries are decided by the orchestrators, not the SDK.
            openai_client = AsyncOpenAI(api_key=config.openai_api_key, timeout=timeout, max_retries=0)

        logging.info(
            "Tiers configured: plantnet=%s openai=%s",
            config.plantnet_enabled,
            config.openai_enabled,
        )
        attach_services(app, config, http_client, openai_client)

        try:
            yield
        finally:
            await _close_quietly(app.state.openai_client)
            await _close_quietly(app.state.http_client)

    app = FastAPI(title="PlantPal", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Report which identification and chat tiers are available.
        """
        app_config: AppConfig = request.app.state.config
        return {
            "ok": True,
            "plantnet_available": app_config.plantnet_enabled,
            "openai_available": app_config.openai_enabled,
        }

    app.include_router(session_router)
    app.include_router(identify_router)
    app.include_router(chat_router)

    return app


app = create_app()
