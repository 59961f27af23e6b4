import logging

import pytest

import run_history_inspect
from initledger.core.history.manager import HistoryManager
from initledger.core.history.types import ModuleHistory
from initledger.utils.log_helper import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def history_root(tmp_path):
    root = tmp_path / "instances"
    manager = HistoryManager(root)
    manager.save_history("i-0abc", [ModuleHistory("net-v1", True), ModuleHistory("disk-v1", False)])
    manager.save_history("i-0def", [])
    return root


def test_lists_every_instance(history_root, capsys):
    code = run_history_inspect.main(["--history-path", str(history_root)])
    out = capsys.readouterr().out

    assert code == 0
    assert "Instance: i-0abc" in out
    assert "Instance: i-0def" in out
    assert "[SUCCESS] net-v1" in out
    assert "[FAILED] disk-v1" in out


def test_single_instance(history_root, capsys):
    code = run_history_inspect.main(["--history-path", str(history_root), "--instance", "i-0def"])
    out = capsys.readouterr().out

    assert code == 0
    assert "i-0def" in out
    assert "i-0abc" not in out


def test_corrupt_history_exit_code(history_root, capsys):
    (history_root / "i-0abc" / "history.json").write_text("{", encoding="utf-8")

    code = run_history_inspect.main(["--history-path", str(history_root)])
    assert code == 1
    assert "i-0abc" in capsys.readouterr().err
