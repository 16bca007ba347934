"""
WhatsApp GPT Demo Bot Entry Point

Integrates:
  - Demo handlers and middleware on a GptBot
  - Green-API webhook receiver (webhook mode)
  - Green-API notification polling (polling mode)
  - Health checks

Run:
  python main.py --mode polling
  python main.py --mode webhook --port 8000
  uvicorn main:app --host 0.0.0.0 --port 8000
"""

import argparse
import asyncio
import logging
import signal
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chatbot import BotConfig, GptBot
from config import Config
from demo import create_demo_config, register_demo
from transport.whatsapp import router as whatsapp_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_bot(config: Optional[BotConfig] = None) -> GptBot:
    """Construct the demo bot, from environment configuration unless given one."""
    return register_demo(GptBot(config or create_demo_config()))


def create_app(bot: Optional[GptBot] = None) -> FastAPI:
    """
    Create the webhook application.

    Args:
        bot: Pre-built bot (tests pass one in); built from the environment otherwise
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("=" * 60)
        logger.info("Starting WhatsApp GPT Demo Bot (webhook mode)...")
        logger.info(f"Environment: {Config.ENVIRONMENT}")
        logger.info("=" * 60)

        app.state.bot = bot
        try:
            if app.state.bot is None:
                app.state.bot = build_bot()
            logger.info(f"LLM Backend: {app.state.bot.config.llm_backend}")
            await app.state.bot.initialize()
            logger.info("Bot started successfully!")
        except Exception as e:
            logger.error(f"Failed to start bot: {e}", exc_info=True)

        yield

        # Shutdown
        if app.state.bot is not None:
            logger.info("Stopping bot...")
            await app.state.bot.aclose()

    app = FastAPI(
        title="WhatsApp GPT Demo Bot",
        description="Green-API WhatsApp bot backed by OpenAI chat models",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Middleware for logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.debug(f"{request.method} {request.url.path}")
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"Request error: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error"},
            )

    app.include_router(whatsapp_router)

    @app.get("/health/live")
    async def health_live():
        """Live health check (Kubernetes liveness probe)."""
        return {"status": "alive"}

    @app.get("/health/ready")
    async def health_ready(request: Request):
        """Readiness health check (Kubernetes readiness probe)."""
        current = getattr(request.app.state, "bot", None)
        if current is None or not current.running:
            return JSONResponse(status_code=503, content={"status": "not_ready"})
        return {"status": "ready"}

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "WhatsApp GPT Demo Bot",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "whatsapp_webhook": "POST /webhook/whatsapp",
                "whatsapp_health": "GET /webhook/whatsapp/health",
                "health_live": "GET /health/live",
                "health_ready": "GET /health/ready",
            },
        }

    return app


def install_sigint_handler(bot: GptBot) -> None:
    """On Ctrl+C: ask the bot to stop and exit without draining in-flight work."""

    def handle_sigint(signum, frame):
        logger.info("Stopping bot...")
        bot.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)


async def run_polling(bot: GptBot) -> None:
    logger.info("Starting WhatsApp GPT Demo Bot...")
    try:
        await bot.start()
    except Exception as e:
        logger.error(f"Failed to start bot: {e}", exc_info=True)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="WhatsApp GPT demo bot")
    parser.add_argument(
        "--mode",
        choices=["polling", "webhook"],
        default=Config.RECEIVE_MODE,
        help="How notifications are received from Green-API",
    )
    parser.add_argument("--port", type=int, default=Config.BOT_PORT)
    args = parser.parse_args(argv)

    bot_config = create_demo_config()
    if not Config.validate(bot_config):
        sys.exit(1)

    if args.mode == "webhook":
        import uvicorn

        uvicorn.run(create_app(), host="0.0.0.0", port=args.port)
        return

    bot = build_bot(bot_config)
    install_sigint_handler(bot)
    asyncio.run(run_polling(bot))


app = create_app()


if __name__ == "__main__":
    main()
