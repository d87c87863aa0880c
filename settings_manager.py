# settings_manager.py
import json
import os
import config # Import for default values
import logging


def get_settings_path() -> str:
    """Full path of settings.json inside the app data folder."""
    return os.path.join(config.get_app_data_folder(), config.SETTINGS_FILENAME)


def get_default_settings() -> dict:
    return {
        "backup_base_dir": config.BACKUP_FOLDER,
        "save_root": None, # None = detect from the platform
        "write_mode": config.DEFAULT_WRITE_MODE,
    }


def load_settings():
    """Load settings from the app data folder.

    Returns a tuple (settings: dict, first_launch: bool). Missing keys are
    filled from the defaults, invalid values are replaced by the default
    with a warning.
    """
    settings_file_path = get_settings_path()
    defaults = get_default_settings()

    if not os.path.exists(settings_file_path):
        logging.info(f"Settings file '{settings_file_path}' not found, using defaults.")
        return defaults.copy(), True

    try:
        with open(settings_file_path, 'r', encoding='utf-8') as f:
            user_settings = json.load(f)
        logging.info(f"Settings loaded successfully from '{settings_file_path}'.")
        if not isinstance(user_settings, dict):
            raise TypeError("settings root is not a JSON object")

        # User settings override defaults
        settings = defaults.copy()
        settings.update(user_settings)

        # --- VALIDATION WRITE MODE ---
        if settings.get("write_mode") not in config.WRITE_MODES:
            logging.warning(f"Invalid write_mode value ('{settings.get('write_mode')}'), using default '{defaults['write_mode']}'.")
            settings["write_mode"] = defaults["write_mode"]

        # --- VALIDATION BACKUP DIR ---
        backup_dir = settings.get("backup_base_dir")
        if not isinstance(backup_dir, str) or not backup_dir.strip():
            logging.warning(f"Invalid backup_base_dir value ('{backup_dir}'), using default '{defaults['backup_base_dir']}'.")
            settings["backup_base_dir"] = defaults["backup_base_dir"]

        # --- VALIDATION SAVE ROOT OVERRIDE ---
        save_root = settings.get("save_root")
        if save_root is not None and (not isinstance(save_root, str) or not save_root.strip()):
            logging.warning(f"Invalid save_root value ('{save_root}'), falling back to platform detection.")
            settings["save_root"] = None

        return settings, False
    except (json.JSONDecodeError, KeyError, TypeError):
        logging.error(f"Failed to read or validate '{settings_file_path}'...", exc_info=True)
        return defaults.copy(), True # Treat as first launch if file is corrupted
    except OSError:
        logging.error(f"Unexpected error reading settings from '{settings_file_path}'.", exc_info=True)
        return defaults.copy(), True


def save_settings(settings_dict):
    """Save the settings dictionary. Returns bool (success)."""
    settings_file_path = get_settings_path()
    try:
        os.makedirs(os.path.dirname(settings_file_path), exist_ok=True)
        with open(settings_file_path, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
        logging.info(f"Settings saved to '{settings_file_path}'.")
        return True
    except (OSError, TypeError) as e:
        logging.error(f"Error saving settings in '{settings_file_path}': {e}")
        return False
