import sys
from pathlib import Path

import pytest

# Ensure project root is importable when pytest is invoked from non-root directories.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    from master_chef.core.config import get_settings
    from master_chef.db.sqlite import init_db

    # Keep API/UI tests deterministic regardless of caller shell environment.
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    monkeypatch.delenv("MASTER_CHEF_DEFAULT_LANGUAGE", raising=False)
    monkeypatch.delenv("MASTER_CHEF_HISTORY_LIMIT", raising=False)
    monkeypatch.setenv("MASTER_CHEF_DB_PATH", str(tmp_path / "master_chef.db"))
    get_settings.cache_clear()
    init_db()
