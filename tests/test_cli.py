"""CLI tests: the full signup → login → whoami → logout flow via CliRunner.

Learn: Each test points CREDSTORE_STORAGE_PATH at a tmp file, so the
session persists between separate invocations exactly like it does
between real shell commands.
"""

import json

import pytest
from click.testing import CliRunner

from credstore.cli.main import main


@pytest.fixture()
def store_path(tmp_path, monkeypatch):
    path = tmp_path / "store.json"
    monkeypatch.setenv("CREDSTORE_STORAGE_BACKEND", "file")
    monkeypatch.setenv("CREDSTORE_STORAGE_PATH", str(path))
    monkeypatch.setenv("CREDSTORE_LOG_LEVEL", "ERROR")
    return path


@pytest.fixture()
def runner():
    return CliRunner()


def _invoke(runner, *args, input=None):
    return runner.invoke(main, list(args), input=input)


def test_version(runner):
    result = _invoke(runner, "--version")
    assert result.exit_code == 0
    assert "credstore" in result.output


def test_full_flow(runner, store_path):
    r = _invoke(runner, "signup", "Ann", "ann@x.com", "--password", "secret1")
    assert r.exit_code == 0, r.output
    assert "Registered ann@x.com" in r.output

    # Signup does not log in
    r = _invoke(runner, "whoami")
    assert r.exit_code == 1
    assert "Not logged in" in r.output

    r = _invoke(runner, "login", "ann@x.com", "--password", "secret1")
    assert r.exit_code == 0, r.output
    assert "Welcome, Ann!" in r.output

    r = _invoke(runner, "whoami")
    assert r.exit_code == 0
    assert "Ann <ann@x.com>" in r.output

    r = _invoke(runner, "logout")
    assert r.exit_code == 0
    assert "Logged out." in r.output

    r = _invoke(runner, "whoami")
    assert r.exit_code == 1

    stored = json.loads(store_path.read_text())
    assert "session" not in stored
    assert json.loads(stored["registry"])[0]["email"] == "ann@x.com"


def test_signup_prompts_for_password(runner, store_path):
    r = _invoke(runner, "signup", "Ann", "ann@x.com", input="secret1\nsecret1\n")
    assert r.exit_code == 0, r.output

    r = _invoke(runner, "login", "ann@x.com", input="secret1\n")
    assert r.exit_code == 0, r.output


def test_signup_validation_error_exits_1(runner, store_path):
    r = _invoke(runner, "signup", "Ann", "ann-at-x.com", "--password", "secret1")
    assert r.exit_code == 1
    assert "Error (email): Invalid email format" in r.output


def test_duplicate_signup(runner, store_path):
    _invoke(runner, "signup", "Ann", "ann@x.com", "--password", "secret1")
    r = _invoke(runner, "signup", "Other", "ann@x.com", "--password", "secret2")
    assert r.exit_code == 1
    assert "Error (email): Email already registered" in r.output


def test_bad_login(runner, store_path):
    _invoke(runner, "signup", "Ann", "ann@x.com", "--password", "secret1")

    r = _invoke(runner, "login", "ann@x.com", "--password", "wrong1")
    assert r.exit_code == 1
    assert "Invalid credentials" in r.output

    r = _invoke(runner, "login", "ghost@x.com", "--password", "secret1")
    assert r.exit_code == 1
    assert "Invalid credentials" in r.output
    # Credentials errors aren't tied to one field
    assert "Error: Invalid credentials" in r.output


def test_users_lists_without_passwords(runner, store_path):
    r = _invoke(runner, "users")
    assert "No registered users." in r.output

    _invoke(runner, "signup", "Ann", "ann@x.com", "--password", "secret1")
    _invoke(runner, "signup", "Bob", "bob@y.org", "--password", "hunter22")

    r = _invoke(runner, "users")
    assert r.exit_code == 0
    assert "ann@x.com" in r.output
    assert "bob@y.org" in r.output
    assert "secret1" not in r.output
    assert r.output.index("ann@x.com") < r.output.index("bob@y.org")


def test_corrupt_store_starts_fresh(runner, store_path):
    store_path.write_text("{definitely not json")

    r = _invoke(runner, "whoami")
    assert r.exit_code == 1
    assert "Not logged in" in r.output

    r = _invoke(runner, "signup", "Ann", "ann@x.com", "--password", "secret1")
    assert r.exit_code == 0, r.output


def test_invalid_configuration(runner, monkeypatch):
    monkeypatch.setenv("CREDSTORE_STORAGE_BACKEND", "floppy")
    r = _invoke(runner, "whoami")
    assert r.exit_code == 1
    assert "invalid configuration" in r.output


def test_short_password_is_reported_against_password_field(runner, store_path):
    r = _invoke(runner, "signup", "Ann", "ann@x.com", "--password", "abc")
    assert r.exit_code == 1
    assert "Error (password): Password must be at least 6 characters" in r.output


def test_unwritable_store_exits_2(runner, store_path):
    # A directory where the store file should be: reads and writes both fail
    store_path.mkdir()

    r = _invoke(runner, "signup", "Ann", "ann@x.com", "--password", "secret1")
    assert r.exit_code == 2
    assert "Error: Failed to save user data" in r.output
