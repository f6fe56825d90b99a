"""FastAPI application for the MCP command bridge.

This is the main entry point for the bridge API server.
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .agent.api import create_bridge_dependencies
from .agent.api import router as bridge_router
from .agent.config import BridgeSettings
from .agent.orchestrator import create_session

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    - Startup: Read settings and create the shared session
    - Shutdown: Close the MCP connection and the LLM client
    """
    logger.info("Starting MCP Command Bridge...")

    settings = BridgeSettings.from_env()
    session = create_session(settings)
    create_bridge_dependencies(session)
    logger.info(f"MCP server: {settings.mcp_server_url}")

    yield

    logger.info("Shutting down MCP Command Bridge...")
    create_bridge_dependencies(None)
    try:
        await session.shutdown()
    except Exception as e:
        logger.warning(f"Error closing session: {e}")


app = FastAPI(
    title="MCP Command Bridge",
    description="""
    Natural-language command bridge for MCP tool servers.

    ## Endpoints

    - **Execute Command**: Run a command; the LLM calls MCP tools until it has an answer
    - **History**: Inspect or clear the shared conversation
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
cors_origins = os.getenv("CORS_ORIGINS", "*").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

app.include_router(bridge_router)


@app.get("/health")
async def health():
    """Global health check."""
    return {"status": "healthy"}


def main() -> None:
    """Run the bridge with uvicorn."""
    import uvicorn

    uvicorn.run(
        "bridge.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )


if __name__ == "__main__":
    main()
