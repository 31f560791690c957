import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from sage.adapters.adapter import NoAdapter
from sage.adapters.github_adapter import GitHubIssueAdapter
from sage.config.config import GitHubConfig, SageConfig, Settings
from sage.main import build_adapters, run


def make_settings(tmp_path: Path, **kwargs) -> Settings:
    return Settings(_env_file=None, data_dir=str(tmp_path / "data"), **kwargs)


class TestBuildAdapters:
    async def test_github_adapter_when_token_configured(self, tmp_path: Path) -> None:
        config = SageConfig(github=GitHubConfig(owner="stakwork", repo="hive", token="t0k"))
        adapters = build_adapters(config, make_settings(tmp_path))
        assert isinstance(adapters["github"], GitHubIssueAdapter)
        assert isinstance(adapters["none"], NoAdapter)
        assert adapters["github"].store.path.parent == tmp_path / "data"
        await adapters["github"].close()

    async def test_token_from_settings(self, tmp_path: Path) -> None:
        config = SageConfig(github=GitHubConfig(owner="stakwork", repo="hive"))
        adapters = build_adapters(config, make_settings(tmp_path, github_token="env-token"))
        assert isinstance(adapters["github"], GitHubIssueAdapter)
        await adapters["github"].close()

    async def test_config_data_dir_wins_over_settings(self, tmp_path: Path) -> None:
        config = SageConfig(
            github=GitHubConfig(owner="stakwork", repo="hive", token="t0k"),
            data_dir=str(tmp_path / "custom"),
        )
        adapters = build_adapters(config, make_settings(tmp_path))
        assert adapters["github"].store.path.parent == tmp_path / "custom"
        await adapters["github"].close()

    def test_no_adapter_without_token(self, tmp_path: Path) -> None:
        config = SageConfig(github=GitHubConfig(owner="stakwork", repo="hive"))
        adapters = build_adapters(config, make_settings(tmp_path, github_token=None))
        assert isinstance(adapters["github"], NoAdapter)


class TestRun:
    async def test_run_initializes_and_closes_adapters(self) -> None:
        adapter = MagicMock(spec=NoAdapter)
        adapter.initialize = AsyncMock()
        adapter.close = AsyncMock()
        stop_event = asyncio.Event()

        task = asyncio.create_task(run({"github": adapter}, stop_event))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        adapter.initialize.assert_awaited_once()
        adapter.close.assert_not_awaited()

        stop_event.set()
        await task
        adapter.close.assert_awaited_once()


async def test_config_webhook_url_becomes_adapter_default(tmp_path: Path) -> None:
    config = SageConfig(
        github=GitHubConfig(owner="stakwork", repo="hive", token="t0k"),
        webhook_url="https://hooks.example/default",
    )
    adapters = build_adapters(config, make_settings(tmp_path))
    assert adapters["github"].get_webhook("github-issue-1") == "https://hooks.example/default"
    await adapters["github"].close()
