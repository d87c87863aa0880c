# errors.py
# -*- coding: utf-8 -*-


class SaveEditorError(Exception):
    """Base exception for the save editor."""


class SaveRootNotFound(SaveEditorError):
    """The game's save folder does not exist (the game was never launched)."""


class NoProfilesFound(SaveEditorError):
    """The save folder contains no Profile_* directories."""


class InvalidSelection(SaveEditorError):
    """A menu or list choice was non-numeric or out of range."""


class PlayerDataFileNotFound(SaveEditorError):
    """The selected profile has no playerdata file."""


class NoPlayerDataFound(SaveEditorError):
    """No JSON block in the save file looks like player data."""


class BackupError(SaveEditorError):
    """A backup could not be written. Not fatal for the session."""


class ValidationError(SaveEditorError):
    """A field value was rejected; the previous value is kept."""


class WriteError(SaveEditorError):
    """The save file could not be written back."""
