"""Fixtures for unit tests."""

from pathlib import Path
from typing import Generator

import pytest
import structlog

from github_backup_manager.configuration.models import (
    BackupConfig,
    CloneTool,
    DirectoryProviderType,
    ListingFailurePolicy,
)


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def ledger_path(tmp_path: Path) -> Path:
    """Location of a ledger file inside a temporary data directory."""
    return tmp_path / "last_updated.json"


@pytest.fixture
def backup_config(tmp_path: Path) -> BackupConfig:
    """A backup configuration rooted in a temporary data directory."""
    return BackupConfig(
        debug=False,
        accounts=("alice",),
        max_per_account=1000,
        limit=10,
        concurrency=4,
        sync_timeout=None,
        listing_timeout=None,
        data_dir=tmp_path / "data",
        provider=DirectoryProviderType.GH_CLI,
        clone_tool=CloneTool.GH,
        listing_failure_policy=ListingFailurePolicy.FAIL_FAST,
        github_api_url="https://api.github.com",
        github_pat_token=None,
    )
