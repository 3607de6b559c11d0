import os
import re
import json
import tempfile


class ParseError(Exception):
    """Raised when an input file does not contain valid JSON."""


def sanitize_filename(name):
    """Convert a name to a valid filename."""
    if not name:
        return "unnamed_output"

    # Remove invalid characters and replace spaces with underscores
    sanitized = re.sub(r'[\\/*?:"<>|]', "", name).replace(' ', '_')

    # Remove any non-ASCII characters
    sanitized = re.sub(r'[^\x00-\x7F]+', '', sanitized)

    # Ensure the filename is not empty after sanitization
    return sanitized.strip('_') or "unnamed_output"


def is_number(value):
    """Return True for ints and floats (bool excluded, NaN accepted)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def load_json(file_path):
    """Read a UTF-8 file and parse it as JSON.

    OSError propagates for unreadable files; text that is not UTF-8 or not
    valid JSON raises ParseError.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"File {file_path} is not valid UTF-8: {e}") from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse JSON file {file_path}: {e}") from e


def write_bytes_atomic(file_path, data):
    """Write data to file_path via a temporary file in the same directory."""
    directory = os.path.dirname(os.path.abspath(file_path))
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.tmp-', suffix=os.path.basename(file_path))
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(tmp_path, file_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    return file_path


def write_text_atomic(file_path, text):
    """UTF-8 text variant of write_bytes_atomic."""
    return write_bytes_atomic(file_path, text.encode('utf-8'))


if __name__ == "__main__":
    print("This module provides utility functions for the mission converter.")
