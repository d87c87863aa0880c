# editor_session.py
# -*- coding: utf-8 -*-
"""
Interactive editing session as an explicit state machine.

Each state has a handler that talks to the user through an injected I/O
object and returns the next state. The console front end passes a colorama
backed implementation; tests pass a scripted one.
"""
import os
import logging
from enum import Enum

import config
import core_logic
import field_editor
import save_parser
import save_path_finder
from errors import BackupError, InvalidSelection, SaveEditorError
from utils import select_by_ordinal


class State(Enum):
    SELECT_PROFILE = "SelectProfile"
    VIEW_RECORD = "ViewRecord"
    EDIT_MENU = "EditMenu"
    EDIT_ALL_VALUES = "EditAllValues"
    EDIT_ONE_VALUE = "EditOneValue"
    EDIT_CONTRACTS = "EditContracts"
    EDIT_ONE_CONTRACT = "EditOneContract"
    QUICK_EDIT_CONTRACTS = "QuickEditContracts"
    RESTORE_BACKUP = "RestoreBackup"
    SAVE_AND_EXIT = "SaveAndExit"
    EXIT_NO_SAVE = "ExitNoSave"


TERMINAL_STATES = (State.SAVE_AND_EXIT, State.EXIT_NO_SAVE)


class SessionIO:
    """What the session needs from a user interface.

    prompt() returns the raw line typed by the user. The output methods only
    display text. This default implementation logs everything, which is
    enough for headless runs that script prompt().
    """

    def prompt(self, text):
        raise NotImplementedError

    def title(self, text):
        logging.info(text)

    def header(self, text):
        logging.info(text)

    def option(self, key, text):
        logging.info(f"{key}. {text}")

    def info(self, text):
        logging.info(text)

    def success(self, text):
        logging.info(text)

    def warning(self, text):
        logging.warning(text)

    def error(self, text):
        logging.error(text)


class EditorSession:
    """Holds the one player record being edited and walks the menu states."""

    def __init__(self, io, save_root, settings=None):
        self.io = io
        self.save_root = save_root
        self.settings = settings or {}
        self.backup_dir = self.settings.get("backup_base_dir") or config.BACKUP_FOLDER
        self.write_mode = self.settings.get("write_mode") or config.DEFAULT_WRITE_MODE

        self.profiles = []
        self.selected_profile = None
        self.save_file_path = None
        self.raw_text = None
        self.block = None
        self.save_data = None
        self.contract_index = None
        self.exit_code = None

        self._handlers = {
            State.SELECT_PROFILE: self.select_profile,
            State.VIEW_RECORD: self.view_record,
            State.EDIT_MENU: self.edit_menu,
            State.EDIT_ALL_VALUES: self.edit_all_values,
            State.EDIT_ONE_VALUE: self.edit_specific_value,
            State.EDIT_CONTRACTS: self.edit_contracts_menu,
            State.EDIT_ONE_CONTRACT: self.edit_one_contract,
            State.QUICK_EDIT_CONTRACTS: self.quick_edit_contracts,
            State.RESTORE_BACKUP: self.restore_from_backup,
            State.SAVE_AND_EXIT: self.save_changes,
            State.EXIT_NO_SAVE: self.exit_without_saving,
        }

    def run(self, state=State.SELECT_PROFILE):
        """Runs until a terminal state has been handled. Returns the exit code.

        Fatal SaveEditorError subclasses propagate to the caller.
        """
        while True:
            logging.debug(f"Session state: {state.value}")
            next_state = self._handlers[state]()
            if state in TERMINAL_STATES:
                return self.exit_code
            state = next_state

    # --- Loading ---

    def select_profile(self):
        self.profiles = save_path_finder.list_profiles(self.save_root)

        self.io.header("Available profiles")
        for i, name in enumerate(self.profiles):
            self.io.option(i + 1, name)

        while True:
            answer = self.io.prompt("Select a profile (number):")
            try:
                self.selected_profile = save_path_finder.select_profile(self.profiles, answer)
                break
            except InvalidSelection as e:
                self.io.error(f"Invalid profile selection. {e}")

        logging.info(f"Selected profile: {self.selected_profile}")
        profile_dir = os.path.join(self.save_root, self.selected_profile)
        self.save_file_path = save_path_finder.find_player_data_file(profile_dir)
        self.load_profile(create_backup=True)
        self.io.success("Successfully loaded player data:")
        return State.VIEW_RECORD

    def load_profile(self, create_backup=False):
        """Reads and parses the save file. The backup is taken before any edit."""
        if create_backup:
            try:
                backup = core_logic.create_backup(self.save_file_path, self.selected_profile, self.backup_dir)
                self.io.info(f"Backup created: {backup.path}")
            except BackupError as e:
                self.io.warning(f"{e}")
                self.io.warning("No backup was made. Changes you save cannot be undone with a restore!")

        try:
            self.raw_text = save_parser.read_save_text(self.save_file_path)
        except OSError as e:
            raise SaveEditorError(f"Error reading save file '{self.save_file_path}': {e}") from e
        self.block = save_parser.extract_player_data(self.raw_text)
        self.save_data = self.block.record

    # --- Display ---

    def view_record(self):
        self.display_current_values()
        return State.EDIT_MENU

    def display_current_values(self):
        for key, field_def in config.EDITABLE_FIELDS.items():
            if field_def.get("type") == "object":
                self.io.header("Saved Contracts")
                for i, contract in enumerate(field_editor.get_contracts(self.save_data)):
                    self.io.option(i + 1, contract.get("id"))
                    self.io.info(f"   Reputation: {contract.get('reputationPoints')}")
                    self.io.info(f"   Done: {contract.get('isDone')}")
                    self.io.info(f"   Taken: {contract.get('isTaken')}")
            else:
                self.io.info(f"{key}: {field_editor.get_field(self.save_data, key)}")

    # --- Menus ---

    def edit_menu(self):
        choices = {
            "1": State.EDIT_ALL_VALUES,
            "2": State.EDIT_ONE_VALUE,
            "3": State.EDIT_CONTRACTS,
            "4": State.RESTORE_BACKUP,
            "5": State.SAVE_AND_EXIT,
            "6": State.EXIT_NO_SAVE,
        }
        self.io.header("Edit options")
        self.io.option(1, "Edit all basic values")
        self.io.option(2, "Edit specific value")
        self.io.option(3, "Edit contracts")
        self.io.option(4, "Restore from backup")
        self.io.option(5, "Save and exit")
        self.io.option(6, "Exit without saving")

        choice = self.io.prompt("Choose an option:").strip()
        if choice in choices:
            return choices[choice]
        self.io.error("Invalid option.")
        return State.EDIT_MENU

    def _prompt_value(self, key, field_def):
        current = field_editor.get_field(self.save_data, key)
        return self.io.prompt(
            f"Enter new value for {key} (current: {current}, {field_editor.describe_range(field_def)}):"
        )

    def edit_all_values(self):
        for key, field_def in field_editor.scalar_fields():
            answer = self._prompt_value(key, field_def)
            if not answer.strip():
                continue # blank keeps the current value
            ok, message = field_editor.set_field(self.save_data, key, answer)
            if not ok:
                self.io.error(message)
        return State.EDIT_MENU

    def edit_specific_value(self):
        keys = list(config.EDITABLE_FIELDS)
        self.io.header("Select value to edit")
        for i, key in enumerate(keys):
            self.io.option(i + 1, key)

        while True:
            choice = self.io.prompt("Choose a value to edit:")
            try:
                key = select_by_ordinal(keys, choice)
                break
            except InvalidSelection:
                self.io.error("Invalid selection.")

        field_def = config.EDITABLE_FIELDS[key]
        if field_def.get("type") == "object":
            return State.EDIT_CONTRACTS

        answer = self._prompt_value(key, field_def)
        if answer.strip():
            ok, message = field_editor.set_field(self.save_data, key, answer)
            if ok:
                self.io.success(message)
            else:
                self.io.error(message)
        return State.EDIT_MENU

    def edit_contracts_menu(self):
        contracts = field_editor.get_contracts(self.save_data)
        if not contracts:
            self.io.warning("This save has no contracts.")
            return State.EDIT_MENU

        self.io.header("Contracts Editor")
        for i, contract in enumerate(contracts):
            self.io.option(i + 1, contract.get("id"))
        self.io.option("Q", "Quick Edit Options")
        self.io.option(0, "Back to main menu")

        choice = self.io.prompt("Select contract to edit (number):").strip()
        if choice.upper() == "Q":
            return State.QUICK_EDIT_CONTRACTS
        if choice == "0":
            return State.EDIT_MENU
        try:
            index = int(choice) - 1
        except ValueError:
            index = -1
        if index < 0 or index >= len(contracts):
            self.io.error("Invalid selection")
            return State.EDIT_CONTRACTS

        self.contract_index = index
        return State.EDIT_ONE_CONTRACT

    def edit_one_contract(self):
        contract = field_editor.get_contracts(self.save_data)[self.contract_index]
        self.io.header(f"Editing {contract.get('id')}")
        self.io.option(1, f"Reputation Points: {contract.get('reputationPoints')}")
        self.io.option(2, f"Is Done: {contract.get('isDone')}")
        self.io.option(3, f"Is Taken: {contract.get('isTaken')}")

        field_choice = self.io.prompt("Select field to edit:").strip()
        if field_choice == "1":
            field_def = field_editor.CONTRACT_FIELDS["reputationPoints"]
            answer = self.io.prompt(
                f"New reputation points (current: {contract.get('reputationPoints')}, {field_editor.describe_range(field_def)}):"
            )
            if answer.strip():
                ok, message = field_editor.set_contract_field(
                    self.save_data, self.contract_index, "reputationPoints", answer)
                if ok:
                    self.io.success(message)
                else:
                    self.io.error(message)
        elif field_choice == "2":
            value = field_editor.toggle_contract_flag(self.save_data, self.contract_index, "isDone")
            self.io.success(f"Is Done set to: {value}")
        elif field_choice == "3":
            value = field_editor.toggle_contract_flag(self.save_data, self.contract_index, "isTaken")
            self.io.success(f"Is Taken set to: {value}")
        else:
            self.io.error("Invalid choice")
        return State.EDIT_CONTRACTS

    def quick_edit_contracts(self):
        self.io.header("Quick Contracts Editor")
        self.io.option(1, "Mark all contracts as TAKEN")
        self.io.option(2, "Mark all contracts as COMPLETED")
        self.io.option(3, "Reset all contracts")
        self.io.option(4, "Go back to edit contracts menu")

        choice = self.io.prompt("Choose an option:").strip()
        if choice == "1":
            field_editor.mark_all_taken(self.save_data)
            self.io.success("All contracts marked as TAKEN")
        elif choice == "2":
            field_editor.mark_all_completed(self.save_data)
            self.io.success("All contracts marked as COMPLETED")
        elif choice == "3":
            field_editor.reset_all_contracts(self.save_data)
            self.io.success("All contracts RESET")
        elif choice != "4":
            self.io.error("Invalid option")
        return State.EDIT_CONTRACTS

    def restore_from_backup(self):
        backups = core_logic.list_backups(self.selected_profile, self.backup_dir)
        if not backups:
            self.io.error("No backups found.")
            return State.EDIT_MENU

        self.io.header("Available backups")
        for i, backup in enumerate(backups):
            self.io.option(i + 1, backup.display_time)

        while True:
            choice = self.io.prompt("Select a backup to restore (number), enter 0 to return:").strip()
            if choice == "0":
                return State.EDIT_MENU
            try:
                selected = select_by_ordinal(backups, choice)
                break
            except InvalidSelection:
                self.io.error("Invalid selection.")

        success, message = core_logic.perform_restore(selected, self.save_file_path)
        if not success:
            self.io.error(message)
            return State.EDIT_MENU

        self.io.success(message)
        # The in-memory record is stale now, reload it from the restored file.
        self.load_profile(create_backup=False)
        self.io.info("Player data reloaded from the restored file.")
        return State.VIEW_RECORD

    # --- Terminal states ---

    def save_changes(self):
        core_logic.save_player_data(
            self.save_data,
            self.save_file_path,
            write_mode=self.write_mode,
            original_text=self.raw_text,
            block=self.block,
        )
        self.io.success("Changes saved successfully!")
        self.exit_code = 0
        return None

    def exit_without_saving(self):
        self.io.info("Exiting without saving changes.")
        self.exit_code = 0
        return None
