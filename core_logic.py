# core_logic.py
# -*- coding: utf-8 -*-
import logging
import os
import json
import re
import shutil
import tempfile
import time
from typing import NamedTuple

import config
from errors import BackupError, WriteError
from utils import sanitize_filename, format_timestamp

BACKUP_NAME_PATTERN = re.compile(r'^backup_(?P<profile>.+)_(?P<timestamp>\d+)\.json$')


class BackupEntry(NamedTuple):
    filename: str
    path: str
    profile_id: str
    timestamp_ms: int

    @property
    def display_time(self) -> str:
        return format_timestamp(self.timestamp_ms)


def _now_ms() -> int:
    return int(time.time() * 1000)


# --- Backup/Restore Operations ---

def ensure_backup_dir(backup_dir):
    """Creates the backup folder if missing. Returns True if it was created now."""
    if os.path.isdir(backup_dir):
        return False
    try:
        os.makedirs(backup_dir, exist_ok=True)
        logging.info(f"Created backup folder at: {os.path.abspath(backup_dir)}")
        return True
    except OSError as e:
        logging.error(f"Error creating backup folder '{backup_dir}': {e}")
        return False


def build_backup_filename(profile_id, timestamp_ms):
    return f"backup_{sanitize_filename(profile_id)}_{timestamp_ms}.json"


def parse_backup_filename(filename):
    """Returns (profile_id, timestamp_ms) or None if the name is not a backup."""
    match = BACKUP_NAME_PATTERN.match(filename)
    if not match:
        return None
    return match.group("profile"), int(match.group("timestamp"))


def create_backup(save_file_path, profile_id, backup_dir, timestamp_ms=None):
    """
    Copy the save file verbatim into the backup folder.

    Args:
        save_file_path: Live save file to copy
        profile_id: Profile directory name (e.g. "Profile_1")
        backup_dir: Backup store folder, created if missing
        timestamp_ms: Creation time in ms since epoch, now when None

    Returns:
        BackupEntry of the new copy. An existing backup is never overwritten:
        the timestamp moves forward until the name is free.

    Raises:
        BackupError if the copy fails.
    """
    timestamp_ms = _now_ms() if timestamp_ms is None else int(timestamp_ms)
    try:
        os.makedirs(backup_dir, exist_ok=True)
        backup_name = build_backup_filename(profile_id, timestamp_ms)
        while os.path.exists(os.path.join(backup_dir, backup_name)):
            timestamp_ms += 1
            backup_name = build_backup_filename(profile_id, timestamp_ms)
        backup_path = os.path.join(backup_dir, backup_name)

        shutil.copyfile(save_file_path, backup_path)
    except OSError as e:
        msg = f"Error creating backup of '{save_file_path}': {e}"
        logging.error(msg)
        raise BackupError(msg) from e

    logging.info(f"Backup created: {backup_path}")
    return BackupEntry(backup_name, backup_path, sanitize_filename(profile_id), timestamp_ms)


def list_backups(profile_id, backup_dir):
    """Backups of exactly this profile, oldest first."""
    backups = []
    if not os.path.isdir(backup_dir):
        return backups

    wanted = sanitize_filename(profile_id)
    try:
        for fname in os.listdir(backup_dir):
            parsed = parse_backup_filename(fname)
            if parsed is None:
                continue
            profile, timestamp_ms = parsed
            if profile != wanted:
                continue
            backups.append(BackupEntry(fname, os.path.join(backup_dir, fname), profile, timestamp_ms))
    except OSError as e:
        logging.error(f"Error listing backups for '{profile_id}': {e}")

    backups.sort(key=lambda b: b.timestamp_ms)
    return backups


def perform_restore(backup, target_save_file_path):
    """
    Copy a backup over the live save file, replacing it entirely.

    Returns:
        Tuple (success: bool, message: str)
    """
    if not os.path.isfile(backup.path):
        msg = f"ERROR: Backup file not found: '{backup.path}'"
        logging.error(msg)
        return False, msg

    logging.warning(f"Restoring '{backup.path}' over '{target_save_file_path}'")
    try:
        shutil.copyfile(backup.path, target_save_file_path)
    except OSError as e:
        msg = f"ERROR restoring '{backup.filename}': {e}"
        logging.error(msg)
        return False, msg

    msg = f"Backup restored from: {backup.path}"
    logging.info(msg)
    return True, msg


# --- Persistence ---

def serialize_record(record):
    # ASCII escapes keep lone surrogates in strings valid on disk
    return json.dumps(record, indent=2, ensure_ascii=True)


def save_player_data(record, save_file_path, write_mode=config.DEFAULT_WRITE_MODE,
                     original_text=None, block=None):
    """
    Write the player record back to the save file.

    write_mode "whole_file" replaces the whole file with the JSON record.
    "replace_block" needs original_text and block (an ExtractedBlock) and
    only swaps block.start:block.end, keeping the rest of the file intact.

    Raises:
        WriteError on any I/O or encoding error, or if replace_block lacks its inputs.
    """
    new_json = serialize_record(record)
    if write_mode == "replace_block":
        if original_text is None or block is None:
            raise WriteError("replace_block mode needs the original file text and block position.")
        content = original_text[:block.start] + new_json + original_text[block.end:]
    elif write_mode == "whole_file":
        content = new_json
    else:
        raise WriteError(f"Unknown write mode '{write_mode}'.")

    target_dir = os.path.dirname(os.path.abspath(save_file_path))
    temp_path = None
    try:
        # Write to a temp file first, then replace
        fd, temp_path = tempfile.mkstemp(prefix=".playerdata_", suffix=".tmp", dir=target_dir)
        with os.fdopen(fd, 'w', encoding='utf-8', errors='surrogateescape', newline='') as f:
            f.write(content)
        os.replace(temp_path, save_file_path)
        temp_path = None
    except (OSError, UnicodeError) as e:
        msg = f"Error saving changes to '{save_file_path}': {e}"
        logging.error(msg)
        raise WriteError(msg) from e
    finally:
        if temp_path and os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError as e_rm:
                logging.warning(f"Unable to remove temp file '{temp_path}': {e_rm}")

    logging.info(f"Player data saved to '{save_file_path}' (mode: {write_mode}).")
    return True
