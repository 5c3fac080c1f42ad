"""Shared fixtures: isolated project home, configs, records and a fake indexer."""

from __future__ import annotations

import itertools
import json
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx
import pytest

from liqo.config import ConfigLocator, ConfigRepository, GlobalConfig
from liqo.config.loader import ENDPOINT_ENV_VARS
from liqo.engine import IndexerClient
from liqo.engine.records import LiquidationRecord

TEST_ENDPOINT = "http://indexer.test/v1/graphql"


class FakeIndexer:
    """httpx.MockTransport handler answering GraphQL posts with canned data."""

    def __init__(
        self,
        data: dict[str, Any] | None = None,
        status_code: int = 200,
        error: Exception | None = None,
        raw: str | None = None,
    ) -> None:
        self.data = data if data is not None else {}
        self.status_code = status_code
        self.error = error
        self.raw = raw
        self.requests: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content) if request.content else {})
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return httpx.Response(self.status_code, text=self.raw)
        return httpx.Response(self.status_code, json={"data": self.data})


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("LIQO_HOME", str(tmp_path))
    for name in ENDPOINT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def sample_global_config(tmp_path: Path) -> GlobalConfig:
    return GlobalConfig(outputs_dir=tmp_path / "outputs")


@pytest.fixture
def temp_config_repository(tmp_path: Path) -> Iterable[ConfigRepository]:
    locator = ConfigLocator(project_root=tmp_path)
    repository = ConfigRepository(locator)
    yield repository


@pytest.fixture
def make_record() -> Callable[..., LiquidationRecord]:
    counter = itertools.count(1)

    def _builder(**overrides: Any) -> LiquidationRecord:
        index = next(counter)
        base: dict[str, Any] = {
            "id": f"1_{index}",
            "chain_id": 1,
            "timestamp": str(1_700_000_000 + index),
            "protocol": "aave",
            "borrower": f"0xb{index:039x}",
            "liquidator": f"0xl{index:039x}",
            "tx_hash": f"0x{index:064x}",
            "collateral_asset": "WETH",
            "debt_asset": "USDC",
            "repaid_assets": "1000000",
            "seized_assets": "500000000000000000",
            "repaid_assets_usd": 1000.0,
            "seized_assets_usd": 1050.5,
        }
        base.update(overrides)
        return LiquidationRecord(**base)

    return _builder


@pytest.fixture
def wire_row() -> Callable[..., dict[str, Any]]:
    def _builder(**overrides: Any) -> dict[str, Any]:
        base: dict[str, Any] = {
            "id": "1_100",
            "chainId": 1,
            "timestamp": "1700000000",
            "protocol": "aave",
            "borrower": "0xborrower",
            "liquidator": "0xliquidator",
            "txHash": "0xtx",
            "collateralAsset": "WETH",
            "debtAsset": "USDC",
            "repaidAssets": "1000000",
            "seizedAssets": "500000000000000000",
            "repaidAssetsUSD": "1000.0",
            "seizedAssetsUSD": "1050.5",
        }
        base.update(overrides)
        return base

    return _builder


@pytest.fixture
def fake_indexer() -> Callable[..., FakeIndexer]:
    return FakeIndexer


@pytest.fixture
def indexer_factory() -> Iterable[Callable[..., IndexerClient]]:
    created: list[IndexerClient] = []

    def _factory(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> IndexerClient:
        client = IndexerClient(TEST_ENDPOINT, transport=httpx.MockTransport(handler), **kwargs)
        created.append(client)
        return client

    yield _factory
    for client in created:
        client.close()
