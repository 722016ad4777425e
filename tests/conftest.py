"""Shared fixtures for bfm tests."""

import pytest

import bfm_cli.config
from bfm_cli.brew.info import PackageInfo
from bfm_cli.brew.store import MemoryInfoStore


def make_info(name, required=(), recommended=(), optional=(), build=(), **kwargs) -> PackageInfo:
    """Build a PackageInfo with the given dependency lists."""
    return PackageInfo(
        name=name.split("/")[-1],
        full_name=name,
        dependencies=list(required),
        recommended_dependencies=list(recommended),
        optional_dependencies=list(optional),
        build_dependencies=list(build),
        **kwargs,
    )


def populate(store, *infos):
    store.ensure_bucket()
    for info in infos:
        store.put_info(info)
    return store


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the user config at a temp dir and clear env overrides."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(bfm_cli.config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(bfm_cli.config, "CONFIG_FILE", str(config_dir / "config.json"))
    for env_var in bfm_cli.config.ENV_OVERRIDES.values():
        monkeypatch.delenv(env_var, raising=False)
    return config_dir


@pytest.fixture
def store():
    """An empty in-memory store with the brew bucket created."""
    memory = MemoryInfoStore()
    memory.ensure_bucket()
    return memory
