from epaper.adapters.token_store import InMemoryTokenStore, JsonFileTokenStore


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "session.json"
    JsonFileTokenStore(path).set("authToken", "abc")
    assert JsonFileTokenStore(path).get("authToken") == "abc"


def test_json_store_remove(tmp_path):
    store = JsonFileTokenStore(tmp_path / "session.json")
    store.set("authToken", "abc")
    store.set("other", "x")
    store.remove("authToken")
    assert store.get("authToken") is None
    assert store.get("other") == "x"
    # Removing twice is fine
    store.remove("authToken")


def test_json_store_missing_file(tmp_path):
    assert JsonFileTokenStore(tmp_path / "none.json").get("authToken") is None


def test_json_store_ignores_corrupt_file(tmp_path, caplog):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileTokenStore(path)
    assert store.get("authToken") is None
    assert "corrupt" in caplog.text
    store.set("authToken", "fresh")
    assert store.get("authToken") == "fresh"


def test_memory_store():
    store = InMemoryTokenStore()
    store.set("k", "v")
    assert store.get("k") == "v"
    store.remove("k")
    store.remove("k")
    assert store.get("k") is None
