# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from shipclip.logging.init import reset_logging

# 見出し行 + 3 データ行 (2 行目は複数行の bio セル)
SAMPLE_CLIP = (
    "No\tBarcode\tผู้รับ\tโทร\tรหัสไปรษณีย์\r\n"
    "1\tJN123456789TH\t718. Somchai Jaidee\t081-234-5678\t10110\r\n"
    '2\t"#70\n💢 COD 590\nFB. Malee Srisuk\n99/1 Moo 3 Bangkok 10250\n0891234567"\tA2B1\tEF582568151TH\r\n'
    "3\tno tracking here\t081-111-2222\r\n"
)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
courier: Kerry Express
timezone: Asia/Bangkok
header_markers: [Barcode, Tracking, ผู้รับ]
resolver:
  bio_min_length: 20
  courier_prefixes: [JN, SP, TH, Kerry, Flash]
database:
  table: shipments
  batch_size: 500
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_clip_file(temp_workdir: Path) -> Path:
    f = temp_workdir / "data" / "orders 18-01-2569_14-30.txt"
    f.write_text(SAMPLE_CLIP, encoding="utf-8")
    return f


@pytest.fixture()
def clean_logging():
    """Fresh application logger bound to the (captured) stdout of the test."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _no_live_db(monkeypatch):
    # テスト中は既定で DB 接続を行わない (live 経路のテストは _db_connection をパッチ)
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")


@pytest.fixture()
def sample_clip_text() -> str:
    return SAMPLE_CLIP
