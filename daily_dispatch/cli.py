"""
Daily Dispatch CLI

Usage:
    daily-dispatch start      Start the scheduler (runs continuously)
    daily-dispatch run-now    Generate a lesson immediately
    daily-dispatch serve      Serve the read-only lessons API
"""

import asyncio
import signal
import sys

import click
import structlog

from .config import Settings, get_settings
from .core.context import AppContext, build_context
from .core.logging import configure_logging
from .lessons.formatter import format_lesson

logger = structlog.get_logger(__name__)

USAGE = """
Lesson Scheduler - Generates lessons daily at 3 AM PHT

Usage:
  daily-dispatch start     Start the scheduler (runs continuously)
  daily-dispatch run-now   Generate a lesson immediately (for testing)
  daily-dispatch serve     Serve the read-only lessons API

Environment variables:
  MEMGRAPH_URI        Memgraph connection URI (default: bolt://localhost:7687)
  MEMGRAPH_USERNAME   Memgraph username (alias: MEMGRAPH_USER)
  MEMGRAPH_PASSWORD   Memgraph password
  OPENAI_API_KEY      OpenAI API key (required)
  NEWSAPI_KEY         NewsAPI key (optional)
  GNEWS_KEY           GNews API key (optional)
  LOG_LEVEL           Logging level (default: INFO)
  LOG_FORMAT          json or text (default: json)
"""


class DispatchGroup(click.Group):
    """Unknown subcommands print the usage text instead of failing."""

    def resolve_command(self, ctx, args):
        if args and self.get_command(ctx, args[0]) is None:
            return args[0], usage, []
        return super().resolve_command(ctx, args)


@click.group(cls=DispatchGroup, invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """Daily Dispatch lesson scheduler"""
    if ctx.invoked_subcommand is None:
        click.echo(USAGE)


@click.command(hidden=True)
def usage():
    click.echo(USAGE)


def _request_shutdown(context: AppContext, sig: signal.Signals) -> None:
    logger.warning("shutdown_signal_received", signal=sig.name)
    context.scheduler.stop()


async def _serve_scheduler(settings: Settings) -> None:
    context = await build_context(settings)
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _request_shutdown, context, sig)

    try:
        await context.scheduler.start()
        await context.scheduler.wait_closed()
    finally:
        await context.close()


async def _run_once(settings: Settings, print_lesson: bool) -> bool:
    context = await build_context(settings)
    try:
        stored = await context.scheduler.run_now()
    except Exception as e:
        logger.error("run_now_failed", error=str(e))
        return False
    finally:
        await context.close()

    click.echo(f"Saved lesson {stored.id}: {stored.title}")
    if print_lesson:
        click.echo(format_lesson(stored))
    return True


@cli.command()
def start():
    """Start the scheduler and run until SIGINT or SIGTERM"""
    settings = get_settings()
    configure_logging(settings)
    asyncio.run(_serve_scheduler(settings))
    sys.exit(0)


@cli.command("run-now")
@click.option("--print", "print_lesson", is_flag=True, help="Print the generated lesson")
def run_now(print_lesson):
    """Generate and save one lesson immediately"""
    settings = get_settings()
    configure_logging(settings)
    succeeded = asyncio.run(_run_once(settings, print_lesson))
    sys.exit(0 if succeeded else 1)


@cli.command()
def serve():
    """Serve the lessons API with uvicorn"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "daily_dispatch.main:create_application",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info",
        access_log=False,
    )


def main():
    cli()


if __name__ == "__main__":
    main()
