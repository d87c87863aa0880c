# save_path_finder.py
# -*- coding: utf-8 -*-
"""
Locates the Thief Simulator save folder, its Profile_* directories and the
playerdata file inside a profile.
"""
import os
import re
import logging
import platform
from typing import List, Optional

import config
from errors import (
    SaveRootNotFound,
    NoProfilesFound,
    PlayerDataFileNotFound,
)
from utils import natural_sort_key, select_by_ordinal


def guess_save_root(system: Optional[str] = None, home: Optional[str] = None, env=None) -> str:
    """Returns the folder where Unity stores the game's per-user data.

    Args:
        system: value of platform.system() ("Windows", "Darwin", "Linux"...).
                Detected when None.
        home: home directory, defaults to the current user's.
        env: mapping used for environment lookups, defaults to os.environ.

    The path is not checked for existence here, see find_save_root().
    """
    system = system or platform.system()
    home = home or os.path.expanduser("~")
    env = os.environ if env is None else env

    if system == "Windows":
        save_path = os.path.join(home, "AppData", "LocalLow", config.DEVELOPER, config.GAME_NAME)
    elif system == "Darwin":
        # Unity on macOS: unity.<Company>.<ProductName without spaces>
        bundle_name = f"unity.{config.DEVELOPER}.{config.GAME_NAME.replace(' ', '')}"
        save_path = os.path.join(home, "Library", "Application Support", bundle_name)
    else:
        config_home = env.get("XDG_CONFIG_HOME") or os.path.join(home, ".config")
        save_path = os.path.join(config_home, "unity3d", config.DEVELOPER, config.GAME_NAME)

    logging.debug(f"guess_save_root: system='{system}' -> '{save_path}'")
    return save_path


def find_save_root(override: Optional[str] = None, system: Optional[str] = None) -> str:
    """Returns the existing save folder or raises SaveRootNotFound."""
    if override:
        save_path = os.path.normpath(os.path.expanduser(override))
        logging.info(f"Using save folder from settings: {save_path}")
    else:
        save_path = guess_save_root(system)

    if not os.path.isdir(save_path):
        logging.error(f"Save folder not found at: {save_path}")
        raise SaveRootNotFound(
            f"Save folder not found at: {save_path}\n"
            "Please launch the game at least once to create save files."
        )

    logging.info(f"Found save folder at: {save_path}")
    return save_path


def list_profiles(save_root: str) -> List[str]:
    """Profile_* directories under save_root in natural order."""
    try:
        entries = os.listdir(save_root)
    except OSError as e:
        logging.error(f"Error listing profiles in '{save_root}': {e}")
        raise NoProfilesFound(f"Unable to read the save folder '{save_root}': {e}") from e

    profiles = [
        name for name in entries
        if name.startswith(config.PROFILE_PREFIX) and os.path.isdir(os.path.join(save_root, name))
    ]
    profiles.sort(key=natural_sort_key)

    if not profiles:
        logging.error(f"No profiles found in '{save_root}'.")
        raise NoProfilesFound("No profiles found.")

    logging.info(f"Found {len(profiles)} profile(s): {profiles}")
    return profiles


def select_profile(profiles: List[str], choice: str) -> str:
    """Maps a 1-based ordinal typed by the user to a profile name.

    Raises InvalidSelection for non-numeric or out-of-range input.
    """
    return select_by_ordinal(profiles, choice)


def find_player_data_file(profile_dir: str) -> str:
    """Full path of the playerdata file inside a profile directory."""
    pattern = re.compile(config.SAVE_FILE_PATTERN)
    try:
        candidates = sorted(
            f for f in os.listdir(profile_dir)
            if pattern.search(f) and os.path.isfile(os.path.join(profile_dir, f))
        )
    except OSError as e:
        logging.error(f"Error loading profile '{profile_dir}': {e}")
        raise PlayerDataFileNotFound(f"Unable to read profile folder '{profile_dir}': {e}") from e

    if not candidates:
        raise PlayerDataFileNotFound("Player data file not found")
    if len(candidates) > 1:
        logging.warning(f"Several player data files in '{profile_dir}': {candidates}. Using '{candidates[0]}'.")

    save_file_path = os.path.join(profile_dir, candidates[0])
    logging.info(f"Player data file: {save_file_path}")
    return save_file_path
