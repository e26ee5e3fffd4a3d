from slink_store.config import get_settings


def test_defaults(monkeypatch):
    for name in ("SLINK_STORAGE_BACKEND", "SLINK_SQLITE_PATH", "SLINK_REMOTE_URL", "SLINK_REMOTE_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    cfg = get_settings()
    assert cfg.STORAGE_BACKEND == "sqlite"
    assert cfg.SQLITE_PATH == "slinks.db"
    assert cfg.REMOTE_URL == ""
    assert cfg.REMOTE_TIMEOUT == 10.0


def test_values_are_read_at_call_time(monkeypatch):
    monkeypatch.setenv("SLINK_STORAGE_BACKEND", " REMOTE ")
    monkeypatch.setenv("SLINK_REMOTE_URL", "https://rpc.test/")
    monkeypatch.setenv("SLINK_SQLITE_TIMEOUT", "2.5")
    cfg = get_settings()
    assert cfg.STORAGE_BACKEND == "remote"
    assert cfg.REMOTE_URL == "https://rpc.test"
    assert cfg.SQLITE_TIMEOUT == 2.5


def test_malformed_number_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("SLINK_REMOTE_TIMEOUT", "soon")
    assert get_settings().REMOTE_TIMEOUT == 10.0
