"""Tests for configuration loading and logging setup."""

import logging
import threading
from decimal import Decimal
from pathlib import Path

import pytest

from inspection_backend.utils.config import Config
from inspection_backend.utils.errors import ErrorType, InspectionReviewError
from inspection_backend.utils.logging import ContextFilter, clear_context, get_context, set_context

ENV_VARS = ["TAX_RATE", "INVOICE_SEQUENCE", "INSPECTION_DATA_DIR", "DOCUMENT_OUTPUT_DIR", "LOG_LEVEL"]

CONFIG_YAML = """
pricing:
  tax_rate: 0.08
  currency: USD
invoicing:
  sequence: counter
  due_days: 45
company:
  name: Test Depot
  address_lines:
    - 1 Harbour Rd
  tax_id: 987
storage:
  data_dir: /srv/inspections
documents:
  language: vi
logging:
  level: DEBUG
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    return str(path)


def test_load_from_yaml(config_file):
    config = Config.load(config_file)

    assert config.pricing.tax_rate == Decimal("0.08")
    assert config.pricing.currency == "USD"
    assert config.invoicing.sequence == "counter"
    assert config.invoicing.due_days == 45
    assert config.company.name == "Test Depot"
    assert config.company.address_lines == ["1 Harbour Rd"]
    assert config.company.tax_id == "987"
    assert config.company.bank_name == "Vietcombank"
    assert config.storage.data_dir == "/srv/inspections"
    assert config.storage.output_dir == "data/documents"
    assert config.documents.language == "vi"
    assert config.logging.level == "DEBUG"


def test_environment_overrides(config_file, monkeypatch):
    monkeypatch.setenv("TAX_RATE", "0.05")
    monkeypatch.setenv("INVOICE_SEQUENCE", "random")
    monkeypatch.setenv("DOCUMENT_OUTPUT_DIR", "/tmp/docs")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    config = Config.load(config_file)

    assert config.pricing.tax_rate == Decimal("0.05")
    assert config.invoicing.sequence == "random"
    assert config.storage.output_dir == "/tmp/docs"
    assert config.logging.level == "WARNING"


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    config = Config.load(str(path))
    assert config == Config.default()


def test_missing_file(tmp_path):
    with pytest.raises(InspectionReviewError) as exc_info:
        Config.load(str(tmp_path / "absent.yaml"))
    assert exc_info.value.error_type == ErrorType.CONFIG_MISSING


@pytest.mark.parametrize("name, value", [
    ("INVOICE_SEQUENCE", "sequential"),
    ("TAX_RATE", "ten percent"),
    ("TAX_RATE", "-0.1"),
    ("TAX_RATE", "NaN"),
])
def test_invalid_values(config_file, monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(InspectionReviewError) as exc_info:
        Config.load(config_file)
    assert exc_info.value.error_type == ErrorType.CONFIG_INVALID


def test_bundled_config_loads():
    config = Config.load(str(Path(__file__).parent / "config.yaml"))
    assert config.pricing.tax_rate == Decimal("0.10")


def test_context_filter_fills_defaults():
    context_filter = ContextFilter()
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

    assert context_filter.filter(record)
    assert record.inspection_id == "-"
    assert record.component == "-"


def test_context_filter_uses_current_context():
    context_filter = ContextFilter()
    context_filter.set_context(inspection_id="INSP-1", component="approve quote")
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

    context_filter.filter(record)
    assert record.inspection_id == "INSP-1"
    assert record.component == "approve quote"


def test_global_context_helpers():
    try:
        set_context(inspection_id="INSP-9")
        assert get_context()["inspection_id"] == "INSP-9"
    finally:
        clear_context()
    assert get_context() == {}


def test_context_is_isolated_between_threads():
    barrier = threading.Barrier(2)
    seen = {}

    def review(inspection_id):
        set_context(inspection_id=inspection_id)
        barrier.wait(timeout=5)
        seen[inspection_id] = get_context()["inspection_id"]
        clear_context()

    threads = [threading.Thread(target=review, args=(name,)) for name in ("INSP-A", "INSP-B")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert seen == {"INSP-A": "INSP-A", "INSP-B": "INSP-B"}
    assert get_context() == {}


def test_set_context_does_not_mutate_previous_snapshot():
    context_filter = ContextFilter()
    context_filter.set_context(inspection_id="INSP-1")
    snapshot = context_filter.context

    context_filter.set_context(component="approve quote")
    assert snapshot == {"inspection_id": "INSP-1"}
    assert context_filter.context == {"inspection_id": "INSP-1", "component": "approve quote"}
