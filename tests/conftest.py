import json
import sys
from pathlib import Path

import pytest

# Ensure the repository root is on sys.path for test imports without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


PLAYER_RECORD = {
    "cash": 100,
    "level": 2,
    "savedContracts": [
        {"id": "c1", "reputationPoints": 5, "isDone": False, "isTaken": True},
    ],
}

RAW_SAVE_TEXT = "garbage{bad json}\n" + json.dumps(PLAYER_RECORD)


class ScriptedIO:
    """Feeds prepared answers to prompt() and records everything shown."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []
        self.output = []

    def prompt(self, text):
        self.prompts.append(text)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt with no scripted answer left: {text!r}")
        return self.answers.pop(0)

    def _record(kind):
        def method(self, *parts):
            self.output.append((kind, " ".join(str(p) for p in parts)))
        return method

    title = _record("title")
    header = _record("header")
    option = _record("option")
    info = _record("info")
    success = _record("success")
    warning = _record("warning")
    error = _record("error")

    def texts(self, kind):
        return [text for k, text in self.output if k == kind]


@pytest.fixture
def save_root(tmp_path):
    """A fake Thief Simulator save folder with three profiles."""
    root = tmp_path / "Thief Simulator"
    for name in ("Profile_1", "Profile_2", "Profile_10"):
        (root / name).mkdir(parents=True)
    (root / "Profile_1" / "playerdata.txt").write_bytes(RAW_SAVE_TEXT.encode("utf-8"))
    (root / "Profile_2" / "playerdata.txt").write_bytes(json.dumps({"cash": 7}).encode("utf-8"))
    (root / "Profile_3.txt").write_text("not a profile")
    (root / "Unity").mkdir()
    return root


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "save_backups"


@pytest.fixture
def settings(backup_dir):
    return {"backup_base_dir": str(backup_dir), "save_root": None, "write_mode": "whole_file"}
