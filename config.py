# config.py
import os
import logging
import platform


# --- Application name (used for the app data folder) ---
APP_NAME = "ThiefSimSaveEditor"
APP_VERSION = "1.0.0"

# --- Game identity (used to build the save folder path) ---
GAME_NAME = "Thief Simulator"
DEVELOPER = "Noble Muffins"

# --- Save layout ---
PROFILE_PREFIX = "Profile_"
SAVE_FILE_PATTERN = r"^playerdata"

# --- Backups ---
BACKUP_FOLDER = "save_backups" # relative, resolved against the working directory at use time

# --- Write policy for the player data block ---
# "whole_file": the file is replaced by the player data JSON only.
# "replace_block": only the extracted block is replaced, surrounding bytes are kept.
WRITE_MODES = ("whole_file", "replace_block")
DEFAULT_WRITE_MODE = "whole_file"

SETTINGS_FILENAME = "settings.json"
LOG_FILENAME = "save_editor.log"

# --- Editable fields ---
# The only keys the editor is allowed to touch. Order is the menu order.
EDITABLE_FIELDS = {
    "cash": {"type": "number", "min": 0, "max": 9999999},
    "experience": {"type": "number", "min": 0, "max": 9999999},
    "level": {"type": "number", "min": 1, "max": 100},
    "skillPoints": {"type": "number", "min": 0, "max": 999},
    "day": {"type": "number", "min": 0, "max": 999},
    "savedContracts": {
        "type": "object",
        "fields": {
            "reputationPoints": {"type": "number", "min": -100, "max": 100},
            "isDone": {"type": "boolean"},
            "isTaken": {"type": "boolean"},
        },
    },
}

CONTRACTS_KEY = "savedContracts"


def get_app_data_folder():
    """Returns the app data folder (%LOCALAPPDATA% on Windows) and creates it
       if missing. Falls back to the current directory."""
    system = platform.system()
    base_path = None
    app_folder = None

    try:
        if system == "Windows":
            base_path = os.getenv('LOCALAPPDATA')
        elif system == "Darwin":
            base_path = os.path.expanduser('~/Library/Application Support')
        else:
            # XDG Base Directory Specification
            base_path = os.getenv('XDG_DATA_HOME') or os.path.expanduser('~/.local/share')

        if not base_path:
            logging.error("Unable to determine the standard user data folder. Using the current folder as fallback.")
            app_folder = os.path.abspath(APP_NAME)
        else:
            app_folder = os.path.join(base_path, APP_NAME)

        if not os.path.exists(app_folder):
            try:
                os.makedirs(app_folder, exist_ok=True)
                logging.info(f"Created application data folder: {app_folder}")
            except OSError as e:
                # Return the attempted path anyway, load/save report their own errors.
                logging.error(f"Unable to create data folder {app_folder}: {e}.")

    except Exception as e:
        logging.error(f"Unexpected error in get_app_data_folder: {e}. Falling back to CWD.", exc_info=True)
        app_folder = os.path.abspath(APP_NAME)
        try:
            os.makedirs(app_folder, exist_ok=True)
        except OSError as e_mkdir:
            logging.error(f"Unable to create fallback data folder {app_folder}: {e_mkdir}")

    return app_folder
