"""
Test configuration and fixtures for gml integration tests.

This module provides:
- CLI availability verification
- A subprocess-based CLI runner
- Configuration loading from tests/config.yaml

Integration tests talk to a real mailbox and are skipped when
tests/config.yaml does not exist. Example:

    search:
      query: "newer_than:30d"
    test_data:
      min_results: 2
"""

import pytest
import subprocess
import json
import os
import sys
import yaml
from typing import Dict, Any, List

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEST_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")


def load_test_config() -> Dict[str, Any]:
    """Load test configuration from tests/config.yaml, or {} if absent."""
    if not os.path.exists(TEST_CONFIG_PATH):
        return {}
    with open(TEST_CONFIG_PATH, 'r') as f:
        return yaml.safe_load(f) or {}


TEST_CONFIG = load_test_config()


@pytest.fixture(scope="session")
def test_config() -> Dict[str, Any]:
    if not TEST_CONFIG:
        pytest.skip("tests/config.yaml not found; integration tests need a real mailbox")
    return TEST_CONFIG


@pytest.fixture(scope="session")
def verify_cli_installed(test_config):
    """
    Verify that the gml CLI runs from the current codebase.

    Runs 'python -m gml.cli --help' from the project root and fails with a
    hint to run 'pip install -e .' if it does not work.
    """
    try:
        result = subprocess.run(
            [sys.executable, "-m", "gml.cli", "--help"],
            capture_output=True,
            text=True,
            timeout=10,
            cwd=PROJECT_ROOT
        )
    except subprocess.TimeoutExpired:
        pytest.fail("CLI help command timed out. Check for hanging processes.")

    if result.returncode != 0:
        pytest.fail(
            f"gml CLI not properly installed. "
            f"Ensure 'pip install -e .' has been run in the project root.\n"
            f"Error: {result.stderr}"
        )

    if "Gmail CLI client" not in result.stdout:
        pytest.fail(
            "gml CLI found but output unexpected. "
            "Run 'pip install -e .' to use the current codebase."
        )


@pytest.fixture(scope="session")
def cli_runner(verify_cli_installed):
    """
    Factory fixture that executes gml commands via subprocess.

    Returns a function taking the command args and returning a dict with
    returncode, stdout, stderr, and json (parsed stdout or None).

    Usage:
        result = cli_runner(["list", "--format", "json"])
        assert result["returncode"] == 0
    """
    def run_command(command_args: List[str]) -> Dict[str, Any]:
        try:
            result = subprocess.run(
                [sys.executable, "-m", "gml.cli"] + command_args,
                capture_output=True,
                text=True,
                timeout=120,
                cwd=PROJECT_ROOT
            )
        except subprocess.TimeoutExpired:
            return {
                "returncode": 124,
                "stdout": "",
                "stderr": "Command timed out",
                "json": None
            }

        json_data = None
        if result.stdout.strip():
            try:
                json_data = json.loads(result.stdout)
            except json.JSONDecodeError:
                json_data = None

        return {
            "returncode": result.returncode,
            "stdout": result.stdout,
            "stderr": result.stderr,
            "json": json_data
        }

    return run_command


@pytest.fixture(scope="session")
def test_message_id(cli_runner, test_config):
    """
    Message ID taken from the first result of the configured search query.

    Fails with a clear message if the mailbox has too little matching data.
    """
    query = test_config.get('search', {}).get('query', '')
    result = cli_runner(["list", "-q", query, "-n", "5", "-f", "id", "--format", "json"])

    if result["returncode"] != 0:
        pytest.fail(
            f"Failed to list test messages.\n"
            f"Error: {result['stderr']}\n"
            f"Make sure 'gml auth' has been run."
        )

    min_results = test_config.get('test_data', {}).get('min_results', 2)
    if not isinstance(result["json"], list) or len(result["json"]) < min_results:
        pytest.fail(
            f"Insufficient test data found in mailbox.\n"
            f"Expected at least {min_results} messages matching: {query}\n"
            f"Update tests/config.yaml with a query that matches your mailbox."
        )

    return result["json"][0]["id"]


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
