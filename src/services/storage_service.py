"""JSON file key-value blob storage with locking.

Mirrors browser local storage: each top-level key of the JSON file holds
one serialised value.
"""
import json
import os
import shutil
import sys
import tempfile
import time
from contextlib import contextmanager
from typing import Any, Dict

from src.utils.exceptions import FileWriteError

if sys.platform != "win32":
    import fcntl


def load_json(file_path: str, retry_count: int = 3, retry_delay: float = 0.1) -> Dict[str, Any]:
    """
    Load and parse JSON file with UTF-8 encoding.

    Args:
        file_path: Path to JSON file
        retry_count: Number of retry attempts for permission errors (default: 3)
        retry_delay: Delay in seconds between retries (default: 0.1)

    Returns:
        dict: Parsed JSON content

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        PermissionError: If file not readable after retries
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    for attempt in range(retry_count):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except PermissionError:
            if attempt < retry_count - 1:
                time.sleep(retry_delay)
                continue
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(
                f"Malformed JSON in {file_path}: {e.msg}",
                e.doc,
                e.pos
            )

    raise PermissionError(f"Cannot read file after {retry_count} attempts: {file_path}")


def save_json(file_path: str, data: Dict[str, Any], backup: bool = True) -> None:
    """
    Save data to JSON file atomically with UTF-8 encoding.

    Args:
        file_path: Path to JSON file
        data: Dictionary to save
        backup: If True, copy the previous file to ``<file>.backup`` first

    Raises:
        FileWriteError: If the backup or the write fails
    """
    dir_path = os.path.dirname(file_path)
    if dir_path and not os.path.exists(dir_path):
        os.makedirs(dir_path, exist_ok=True)

    if backup and os.path.exists(file_path):
        try:
            shutil.copy2(file_path, f"{file_path}.backup")
        except OSError as e:
            raise FileWriteError(f"Failed to create backup: {e}") from e

    temp_fd, temp_path = tempfile.mkstemp(
        dir=dir_path if dir_path else ".",
        prefix=".tmp_",
        suffix=".json"
    )

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, file_path)
    except (OSError, TypeError, ValueError) as e:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise FileWriteError(f"Failed to write file {file_path}: {e}") from e


@contextmanager
def lock_file(file_path: str, timeout: float = 5.0):
    """
    Context manager for exclusive file locking with retry.

    Args:
        file_path: Path to file to lock
        timeout: Maximum seconds to wait for lock acquisition (default: 5.0)

    Usage:
        with lock_file('data/users.json'):
            users = get_item('data/users.json', 'users', [])
            ...

    Raises:
        TimeoutError: If unable to acquire lock within timeout
        FileNotFoundError: If file doesn't exist
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Cannot lock non-existent file: {file_path}")

    if sys.platform == "win32":
        # Sidecar lock file avoids handle conflicts with os.replace
        lock_file_path = f"{file_path}.lock"
        start_time = time.time()
        while True:
            try:
                lock_fd = os.open(lock_file_path, os.O_CREAT | os.O_EXCL | os.O_RDWR)
                break
            except FileExistsError:
                if time.time() - start_time > timeout:
                    raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                time.sleep(0.05)

        try:
            yield
        finally:
            os.close(lock_fd)
            try:
                os.remove(lock_file_path)
            except FileNotFoundError:
                pass
    else:
        lock_fd = open(file_path, "r+")
        try:
            start_time = time.time()
            while True:
                try:
                    fcntl.flock(lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except OSError:
                    if time.time() - start_time > timeout:
                        raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                    time.sleep(0.05)

            yield

        finally:
            fcntl.flock(lock_fd.fileno(), fcntl.LOCK_UN)
            lock_fd.close()


def get_item(file_path: str, key: str, default: Any = None) -> Any:
    """
    Read one key from the blob file.

    Returns:
        Stored value, or default if the file or key is missing

    Raises:
        ValueError: If the file is malformed or its root is not a JSON object
    """
    if not os.path.exists(file_path):
        return default
    data = load_json(file_path)
    if not isinstance(data, dict):
        raise ValueError(f"Blob root must be a JSON object: {file_path}")
    return data.get(key, default)


def set_item(file_path: str, key: str, value: Any, backup: bool = False) -> None:
    """
    Write one key into the blob file, keeping the other keys.

    Creates the file if it does not exist yet.
    """
    data = load_json(file_path) if os.path.exists(file_path) else {}
    if not isinstance(data, dict):
        raise ValueError(f"Blob root must be a JSON object: {file_path}")
    data[key] = value
    save_json(file_path, data, backup=backup)


def ensure_blob_file(file_path: str) -> None:
    """Create an empty blob file so it can be locked."""
    if not os.path.exists(file_path):
        save_json(file_path, {}, backup=False)
