import json
from pathlib import Path

import pytest

from querytypes.schemas.config import ParsedConfig


GET_NOTIFICATIONS = {
    "name": "GetNotifications",
    "returnTypes": [
        {"returnName": "payload", "columnName": "payload", "type": "json", "nullable": False},
        {
            "returnName": "type",
            "columnName": "type",
            "type": {"name": "PayloadType", "enumValues": ["message", "dynamite"]},
            "nullable": False,
        },
    ],
    "paramMetadata": {
        "params": ["uuid"],
        "mapping": [{"name": "id", "type": "scalar", "assignedIndex": 1}],
    },
}


@pytest.fixture
def get_notifications():
    return json.loads(json.dumps(GET_NOTIFICATIONS))


@pytest.fixture
def src_dir(tmp_path) -> Path:
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def write_query_file(src_dir):
    """Write a descriptor file below src_dir and return its path."""
    def _write(relative: str, queries=None, mode: str = "sql-file") -> Path:
        path = src_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if queries is None:
            queries = [GET_NOTIFICATIONS]
        path.write_text(json.dumps({"mode": mode, "queries": queries}, indent=2), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def make_config(src_dir):
    def _make(**overrides) -> ParsedConfig:
        data = {
            "srcDir": str(src_dir),
            "transforms": [{"mode": "sql", "include": "*.json"}],
        }
        data.update(overrides)
        return ParsedConfig.model_validate(data)
    return _make
