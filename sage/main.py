import asyncio
import contextlib
import signal

import structlog

from sage.adapters.adapter import AdapterName, ChatAdapter, empty_adapters
from sage.adapters.github_adapter import GitHubIssueAdapter
from sage.config.config import SageConfig, Settings, load_config, settings

if settings.log_json:
    _renderers: list = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
else:
    _renderers = [structlog.dev.ConsoleRenderer()]

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        *_renderers,
    ]
)

logger = structlog.get_logger(__name__)


def build_adapters(config: SageConfig, app_settings: Settings = settings) -> dict[AdapterName, ChatAdapter]:
    """Create one adapter per backend; backends without credentials get a NoAdapter."""
    adapters = empty_adapters()

    github = config.github
    token = github.token or app_settings.github_token
    if github.owner and github.repo and token:
        adapters["github"] = GitHubIssueAdapter(
            token=token,
            owner=github.owner,
            repo=github.repo,
            data_dir=config.data_dir or app_settings.data_dir,
            poll_interval=app_settings.poll_interval_seconds,
            dry_run=config.dry_run,
            default_webhook_url=config.webhook_url,
        )
    else:
        logger.warning("github_adapter_disabled", reason="missing owner, repo or token")
    return adapters


async def run(adapters: dict[AdapterName, ChatAdapter], stop_event: asyncio.Event) -> None:
    """Initialize every adapter, wait for ``stop_event``, then close them."""
    for name, adapter in adapters.items():
        await adapter.initialize()
        logger.info("adapter_initialized", adapter=name)

    try:
        await stop_event.wait()
    finally:
        for adapter in adapters.values():
            await adapter.close()
        logger.info("shutdown")


async def _serve(config: SageConfig) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)
    await run(build_adapters(config), stop_event)


def main() -> None:
    config = load_config(settings.config_path)
    asyncio.run(_serve(config))


if __name__ == "__main__":
    main()
