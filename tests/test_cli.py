"""Tests for the supportspark CLI command groups."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from supportspark.storage import DEMO_MEMBER_ID, DEMO_SUPPORTER_ID, FileStorage, Message
from cli.commands.conversations import conversations_app
from cli.commands.data import data_app
from cli.commands.supporters import supporters_app
from cli.commands.users import users_app
from cli.main import app

runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point every command at a fresh data directory."""
    path = tmp_path / "data"
    monkeypatch.setattr("supportspark.config.settings.data_dir", path)
    return path


@pytest.fixture
def storage(data_dir) -> FileStorage:
    return FileStorage(data_dir).init()


# ---------------------------------------------------------------------------
# data
# ---------------------------------------------------------------------------

def test_data_init_seeds_demo(data_dir):
    result = runner.invoke(data_app, ["init"])
    assert result.exit_code == 0
    assert "Storage ready" in result.stdout
    assert "Demo data seeded" in result.stdout
    assert (data_dir / "users.json").exists()
    assert (data_dir / "conversations" / "meta.json").exists()

    again = runner.invoke(data_app, ["init"])
    assert again.exit_code == 0
    assert "Demo data already present." in again.stdout


def test_data_init_without_demo(data_dir):
    result = runner.invoke(data_app, ["init", "--no-demo"])
    assert result.exit_code == 0
    assert "users=0" in result.stdout
    assert "Demo data" not in result.stdout
    assert FileStorage(data_dir).init().list_users() == []


def test_root_app_runs_subcommands(data_dir):
    result = runner.invoke(app, ["--log-level", "WARNING", "data", "init", "--no-demo"])
    assert result.exit_code == 0
    assert "Storage ready" in result.stdout


# ---------------------------------------------------------------------------
# users
# ---------------------------------------------------------------------------

def test_users_list_empty(data_dir):
    result = runner.invoke(users_app, ["list"])
    assert result.exit_code == 0
    assert "No users found." in result.stdout


def test_users_create_and_list(data_dir):
    result = runner.invoke(
        users_app,
        ["create", "--email", "alice@example.com", "--first-name", "Alice"],
        input="secret\n",
    )
    assert result.exit_code == 0
    assert "✅ User created: alice@example.com" in result.stdout

    user = FileStorage(data_dir).init().get_user_by_email("alice@example.com")
    assert user is not None
    assert user.password != "secret"

    listed = runner.invoke(users_app, ["list"])
    assert "alice@example.com" in listed.stdout
    assert "'Alice'" in listed.stdout


def test_users_create_duplicate(data_dir, storage):
    storage.create_user("alice@example.com", "x")
    result = runner.invoke(
        users_app, ["create", "--email", "alice@example.com", "--password", "pw"]
    )
    assert result.exit_code == 1
    assert "❌ Email already registered" in result.stdout


# ---------------------------------------------------------------------------
# conversations
# ---------------------------------------------------------------------------

def test_conversations_list_unknown_user(data_dir):
    result = runner.invoke(conversations_app, ["list", "--user", "nobody"])
    assert result.exit_code == 1
    assert "❌ User not found" in result.stdout


def test_conversations_list_none(data_dir, storage):
    user = storage.create_user("alice@example.com", "x")
    result = runner.invoke(conversations_app, ["list", "--user", user.id])
    assert result.exit_code == 0
    assert "No conversations found." in result.stdout


def test_conversations_list_for_demo_supporter(data_dir):
    runner.invoke(data_app, ["init"])
    result = runner.invoke(conversations_app, ["list", "--user", DEMO_SUPPORTER_ID])
    assert result.exit_code == 0
    lines = [line for line in result.stdout.splitlines() if line.strip()]
    assert len(lines) == 2
    # Neither thread belongs to the supporter
    assert all(not line.startswith("*") for line in lines)
    assert "Starting fresh after a big change" in result.stdout


def test_conversations_list_marks_own(data_dir, storage):
    user = storage.create_user("alice@example.com", "x")
    storage.create_conversation(user.id, "Mine", Message("m1", user.id, "Alice", "hi"))
    result = runner.invoke(conversations_app, ["list", "--user", user.id])
    assert result.stdout.startswith("* #1  Mine")


def test_conversations_show(data_dir):
    runner.invoke(data_app, ["init"])
    result = runner.invoke(conversations_app, ["show", "1"])
    assert result.exit_code == 0
    assert result.stdout.startswith(f"#1 Starting fresh after a big change  ({DEMO_MEMBER_ID})")
    assert "James Chen:" in result.stdout


def test_conversations_show_missing(data_dir):
    result = runner.invoke(conversations_app, ["show", "7"])
    assert result.exit_code == 1
    assert "❌ Conversation not found" in result.stdout


# ---------------------------------------------------------------------------
# supporters
# ---------------------------------------------------------------------------

def test_supporters_list(data_dir):
    runner.invoke(data_app, ["init"])
    result = runner.invoke(supporters_app, ["list", "--member", DEMO_MEMBER_ID])
    assert result.exit_code == 0
    assert "Supporters:" in result.stdout
    assert f"{DEMO_SUPPORTER_ID}  (accepted)" in result.stdout


def test_supporters_list_empty(data_dir):
    result = runner.invoke(supporters_app, ["list", "--member", "nobody"])
    assert result.exit_code == 0
    assert "No supporter relationships found." in result.stdout


def test_users_create_normalizes_email(data_dir):
    result = runner.invoke(
        users_app, ["create", "--email", "Carol@Example.ORG", "--password", "pw"]
    )
    assert result.exit_code == 0
    assert "✅ User created: Carol@example.org" in result.stdout
    assert FileStorage(data_dir).init().get_user_by_email("Carol@example.org") is not None


def test_users_create_invalid_email(data_dir):
    result = runner.invoke(users_app, ["create", "--email", "not-an-email", "--password", "pw"])
    assert result.exit_code == 1
    assert "❌ Invalid email address" in result.stdout
