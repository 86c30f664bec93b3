"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from notekeeper.core.session import Session, open_session


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch) -> Path:
    """把所有默认路径指向临时 data 目录"""
    monkeypatch.setenv("NOTEKEEPER_DATA_DIR", str(tmp_path / "data"))
    for name in ("DB_PATH", "EXPORT_DIR", "CACHE_DIR", "OUTBOX_DIR"):
        monkeypatch.delenv(f"NOTEKEEPER_{name}", raising=False)
    return tmp_path / "data"


@pytest_asyncio.fixture
async def session(data_dir: Path) -> AsyncGenerator[Session, None]:
    """使用默认协作方打开的会话"""
    s = await open_session()
    yield s
    await s.close()
