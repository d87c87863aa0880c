import json

import pytest

import core_logic
from conftest import PLAYER_RECORD, RAW_SAVE_TEXT, ScriptedIO
from editor_session import EditorSession, State
from errors import NoPlayerDataFound


def run_session(save_root, settings, answers):
    io = ScriptedIO(answers)
    session = EditorSession(io, str(save_root), settings)
    exit_code = session.run()
    assert io.answers == [], "not every scripted answer was used"
    return exit_code, io, session


def saved_record(save_root, profile="Profile_1"):
    return json.loads((save_root / profile / "playerdata.txt").read_text(encoding="utf-8"))


def test_edit_cash_then_save(save_root, settings, backup_dir):
    # profile 1, edit specific value, cash, 500, save and exit
    exit_code, io, _ = run_session(save_root, settings, ["1", "2", "1", "500", "5"])

    assert exit_code == 0
    record = saved_record(save_root)
    assert record["cash"] == 500
    assert record["level"] == 2
    assert record["savedContracts"] == PLAYER_RECORD["savedContracts"]
    assert "cash updated to: 500" in io.texts("success")

    backups = core_logic.list_backups("Profile_1", str(backup_dir))
    assert len(backups) == 1
    assert (backup_dir / backups[0].filename).read_bytes() == RAW_SAVE_TEXT.encode("utf-8")


def test_exit_without_saving_keeps_file(save_root, settings):
    exit_code, _, session = run_session(save_root, settings, ["1", "2", "1", "500", "6"])

    assert exit_code == 0
    assert session.save_data["cash"] == 500
    assert (save_root / "Profile_1" / "playerdata.txt").read_bytes() == RAW_SAVE_TEXT.encode("utf-8")


def test_invalid_input_reprompts(save_root, settings):
    exit_code, io, session = run_session(save_root, settings, ["abc", "9", "1", "7", "6"])

    assert exit_code == 0
    assert session.selected_profile == "Profile_1"
    assert len(io.texts("error")) == 3


def test_edit_all_values_with_rejections(save_root, settings):
    answers = ["1", "1",
               "",      # cash: keep
               "abc",   # experience: rejected
               "0",     # level: below min, rejected
               "",      # skillPoints: keep
               "12",    # day
               "5"]
    exit_code, io, _ = run_session(save_root, settings, answers)

    assert exit_code == 0
    record = saved_record(save_root)
    assert record["cash"] == 100
    assert record["level"] == 2
    assert record["day"] == 12
    assert "experience" not in record
    assert len(io.texts("error")) == 2


def test_edit_one_contract(save_root, settings):
    answers = ["1", "3",
               "1", "1", "150",   # rejected, out of range
               "1", "1", "-20",
               "1", "2",          # toggle done
               "0", "5"]
    exit_code, _, _ = run_session(save_root, settings, answers)

    assert exit_code == 0
    assert saved_record(save_root)["savedContracts"] == [
        {"id": "c1", "reputationPoints": -20, "isDone": True, "isTaken": True}
    ]


def test_quick_reset_contracts(save_root, settings):
    exit_code, io, _ = run_session(save_root, settings, ["1", "3", "q", "3", "0", "5"])

    assert exit_code == 0
    assert saved_record(save_root)["savedContracts"] == [
        {"id": "c1", "reputationPoints": 0, "isDone": False, "isTaken": False}
    ]
    assert "All contracts RESET" in io.texts("success")


def test_specific_value_contracts_entry_opens_contract_menu(save_root, settings):
    exit_code, _, _ = run_session(save_root, settings, ["1", "2", "6", "Q", "2", "0", "5"])
    assert exit_code == 0
    assert saved_record(save_root)["savedContracts"][0]["isDone"] is True


def test_save_without_contracts(save_root, settings):
    exit_code, io, _ = run_session(save_root, settings, ["2", "3", "6"])
    assert exit_code == 0
    assert "This save has no contracts." in io.texts("warning")


def test_restore_older_backup_then_save(save_root, settings, backup_dir):
    backup_dir.mkdir()
    (backup_dir / "backup_Profile_1_1000.json").write_text(json.dumps({"cash": 42, "level": 7}))

    # profile 1, restore, invalid pick, oldest backup, save
    exit_code, io, session = run_session(save_root, settings, ["1", "4", "9", "1", "5"])

    assert exit_code == 0
    assert session.save_data == {"cash": 42, "level": 7}
    assert saved_record(save_root) == {"cash": 42, "level": 7}
    assert "Invalid selection." in io.texts("error")


def test_restore_menu_back(save_root, settings):
    exit_code, _, _ = run_session(save_root, settings, ["1", "4", "0", "6"])
    assert exit_code == 0


def test_backup_failure_is_not_fatal(save_root, settings, backup_dir):
    backup_dir.write_text("a file where the backup folder should be")

    exit_code, io, _ = run_session(save_root, settings, ["1", "2", "1", "500", "5"])

    assert exit_code == 0
    assert saved_record(save_root)["cash"] == 500
    assert any("No backup was made" in text for text in io.texts("warning"))


def test_replace_block_mode_keeps_garbage_prefix(save_root, settings):
    settings["write_mode"] = "replace_block"
    exit_code, _, _ = run_session(save_root, settings, ["1", "2", "1", "500", "5"])

    assert exit_code == 0
    text = (save_root / "Profile_1" / "playerdata.txt").read_text(encoding="utf-8")
    assert text.startswith("garbage{bad json}\n")


def test_unparseable_save_is_fatal(save_root, settings):
    (save_root / "Profile_2" / "playerdata.txt").write_text("{nothing useful}")
    session = EditorSession(ScriptedIO(["2"]), str(save_root), settings)
    with pytest.raises(NoPlayerDataFound):
        session.run()


def test_run_can_start_from_any_state(save_root, settings):
    io = ScriptedIO(["5"])
    session = EditorSession(io, str(save_root), settings)
    session.selected_profile = "Profile_2"
    session.save_file_path = str(save_root / "Profile_2" / "playerdata.txt")
    session.load_profile()
    session.save_data["cash"] = 8

    assert session.run(State.EDIT_MENU) == 0
    assert saved_record(save_root, "Profile_2") == {"cash": 8}
