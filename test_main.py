import json
import logging

from config import DEFAULT_CONFIG
from main import build_session, load_settings


def _reset_logger():
    logger = logging.getLogger("echoes")
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_first_run_logs_config_creation(tmp_path, caplog):
    path = tmp_path / "ar_config.json"
    try:
        config = load_settings(str(path))
    finally:
        _reset_logger()
    assert path.exists()
    assert config == DEFAULT_CONFIG
    assert f"Created default config at {path}" in caplog.text


def test_config_log_level_applied(tmp_path):
    path = tmp_path / "ar_config.json"
    path.write_text(json.dumps(dict(DEFAULT_CONFIG, log_level="DEBUG")))
    try:
        load_settings(str(path))
        assert logging.getLogger("echoes").level == logging.DEBUG
    finally:
        _reset_logger()


def test_build_session_wires_components(config):
    session = build_session(config)
    assert session.revisit is not None
    assert session.recorder is None
    assert session.engine.width == 400
