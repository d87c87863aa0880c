# utils.py
import re
from datetime import datetime

from errors import InvalidSelection


def sanitize_filename(filename):
    """
    Sanitizes a string to be safe for use as a filename or directory name.
    Removes or replaces characters that are typically invalid on most filesystems.
    """
    if not isinstance(filename, str):
        filename = str(filename) # Ensure it's a string

    # \ / : * ? " < > | and control characters (0-31)
    illegal_chars_pattern = r'[\\/:*?"<>|\x00-\x1F]'

    # Replace illegal characters with an underscore
    sanitized = re.sub(illegal_chars_pattern, '_', filename)

    # Remove leading/trailing whitespace and dots, as they can cause issues
    sanitized = sanitized.strip(' .')

    # If the filename becomes empty after sanitization, provide a default
    if not sanitized:
        return "sanitized_empty_name"

    return sanitized


def natural_sort_key(name):
    """Sort key that orders 'Profile_2' before 'Profile_10'."""
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r'(\d+)', name)]


def format_timestamp(timestamp_ms):
    """Milliseconds since epoch -> local 'YYYY-MM-DD HH:MM:SS'."""
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return "Unknown Date"


def select_by_ordinal(items, choice):
    """Maps a 1-based number typed by the user to an item of `items`.

    Raises InvalidSelection for non-numeric or out-of-range input.
    """
    try:
        index = int(str(choice).strip()) - 1
    except ValueError:
        raise InvalidSelection(f"'{choice}' is not a number.") from None
    if index < 0 or index >= len(items):
        raise InvalidSelection(f"Choose a number between 1 and {len(items)}.")
    return items[index]
