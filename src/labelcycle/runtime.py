"""Runtime helpers for labelcycle CLI orchestration."""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from labelcycle.client import DryRunLabelClient, InMemoryLabelClient, LabelClient
from labelcycle.config import (
    CONFIG_DEFAULT,
    ConfigError,
    LabelcycleConfig,
    default_config,
    load_config,
)
from labelcycle.env_auth import EnvAuthConfig, create_env_auth_manager
from labelcycle.github_rest import GitHubRestClient
from labelcycle.logging import get_logger
from labelcycle.models import ItemRef
from labelcycle.retry import RetryConfig


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def prepare_config(
    args: Any, *, loader: Callable[[str], LabelcycleConfig] = load_config
) -> LabelcycleConfig:
    """Load config for the given argparse namespace.

    An explicit ``--config`` must exist; otherwise the default file is used
    when present and built-in defaults when not.
    """
    explicit = getattr(args, "config", None)
    if explicit:
        return loader(explicit)
    if Path(CONFIG_DEFAULT).exists():
        return loader(CONFIG_DEFAULT)
    return default_config()


def mock_enabled(args: Any) -> bool:
    return bool(getattr(args, "mock", False)) or os.environ.get("LABELCYCLE_MOCK") == "1"


def build_client(cfg: LabelcycleConfig, args: Any, item: ItemRef | None = None) -> LabelClient:
    client: LabelClient
    if mock_enabled(args):
        seeded = [
            label.strip()
            for label in (getattr(args, "mock_labels", None) or "").split(",")
            if label.strip()
        ]
        client = InMemoryLabelClient({item: seeded} if item is not None else None)
    else:
        client = _build_rest_client(cfg)
    if getattr(args, "dry_run", False):
        client = DryRunLabelClient(client)
    return client


def _build_rest_client(cfg: LabelcycleConfig) -> GitHubRestClient:
    auth = create_env_auth_manager(
        EnvAuthConfig(
            load_dotenv=cfg.env_auth_load_dotenv,
            dotenv_path=cfg.env_auth_dotenv_path,
            github_token_var=cfg.token_env,
        )
    )
    token = auth.get_github_token()
    if not token:
        raise ConfigError(f"No GitHub token found (set {cfg.token_env})")
    return GitHubRestClient(
        token=token,
        base_url=cfg.api_url,
        retry=RetryConfig(attempts=cfg.retry_attempts, base_sleep=cfg.retry_base_sleep),
    )


def execute_command(handler: _HandlerCallable, command: str) -> int:
    """Execute a command handler, logging its duration and exit code."""
    logger = get_logger()
    start = time.perf_counter()
    try:
        result = handler()
    except Exception as exc:
        logger.log_error(f"command {command} failed", error=str(exc), command=command)
        raise
    exit_code = int(result) if result is not None else 0
    logger.log_performance(
        f"cli_{command}", (time.perf_counter() - start) * 1000, exit_code=exit_code
    )
    return exit_code


__all__ = ["prepare_config", "mock_enabled", "build_client", "execute_command"]
