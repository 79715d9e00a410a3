"""
test_app_setup.py
-----------------
Logging goes to the configured file; console helpers print plain JSON and errors.
"""
import json
import logging

from common.app_setup import print_and_log, print_error, print_json, setup_logging


def test_setup_logging_writes_to_logfile(tmp_path):
    logfile = tmp_path / "vmapi.log"
    logger = setup_logging(app_name="vmapi-test", logfile=str(logfile))
    logging.getLogger("vmapi.normalize").warning("Cannot normalize VM abc")
    for handler in logger.handlers:
        handler.flush()
    assert "WARNING" in logfile.read_text()
    assert "Cannot normalize VM abc" in logfile.read_text()


def test_print_json_is_parseable(capsys):
    payload = [{"id": "5b4f8d6a-1c2e-4f7a-9b3d-0a1b2c3d4e01", "metadata": {"user-script": "x" * 200}}]
    print_json(payload)
    assert json.loads(capsys.readouterr().out) == payload


def test_print_error_goes_to_stderr_and_log(tmp_path, capsys):
    logfile = tmp_path / "vmapi.log"
    setup_logging(app_name="vmapi-test", logfile=str(logfile))
    print_error("Invalid filter: [brand] not allowed")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Invalid filter: [brand] not allowed" in captured.err
    assert "ERROR" in logfile.read_text()


def test_print_and_log(tmp_path, capsys):
    logfile = tmp_path / "vmapi.log"
    setup_logging(app_name="vmapi-test", logfile=str(logfile))
    print_and_log("Fetched 3 VMs")
    assert "Fetched 3 VMs" in capsys.readouterr().out
    assert "Fetched 3 VMs" in logfile.read_text()
