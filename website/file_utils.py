"""
File utility functions for the website backend.
Common file operations to avoid code duplication.
"""
import json
import os
import tempfile
from typing import Any, Dict


def load_json_file(filepath: str) -> Dict[str, Any]:
    """
    Load a JSON object from a file.

    Args:
        filepath: Path to the JSON file

    Returns:
        Loaded JSON data

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not a JSON object
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {filepath}, got {type(data).__name__}")
    return data


def save_json_file(filepath: str, data: Dict[str, Any], ensure_dir: bool = True) -> None:
    """
    Save data to a JSON file, replacing any previous content.

    The data is written to a temporary file next to the target and moved into
    place, so readers never see a half-written file.

    Args:
        filepath: Path to save the JSON file
        data: Data to save
        ensure_dir: Whether to create parent directory if it doesn't exist
    """
    directory = os.path.dirname(filepath) or "."
    if ensure_dir:
        os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, filepath)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
