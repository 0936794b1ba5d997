"""
Logging helper module for terminal-first logging.
Output goes to stdout with formatted prefixes, and to a log file once one is set.
"""

from pathlib import Path
from typing import Optional, TextIO

_log_file_path: Optional[Path] = None
_log_file: Optional[TextIO] = None


def _log(message: str):
    """Write message to stdout and, if configured, the log file."""
    print(message)
    if _log_file is not None:
        _log_file.write(message + '\n')
        _log_file.flush()


class Log:
    """Simple logging class that outputs to stdout and log file with formatted prefixes."""

    @staticmethod
    def section(title: str):
        """Print a section header: blank line + '===== TITLE ====='"""
        _log("")
        _log(f"===== {title} =====")

    @staticmethod
    def info(message: str):
        """Print an info message: '[INFO] message'"""
        _log(f"[INFO] {message}")

    @staticmethod
    def warn(message: str):
        """Print a warning message: '[WARN] message'"""
        _log(f"[WARN] {message}")

    @staticmethod
    def error(message: str):
        """Print an error message: '[ERROR] message'"""
        _log(f"[ERROR] {message}")

    @staticmethod
    def kv(pairs: dict):
        """
        Print key-value pairs: '[KV] key=value | key2=value2'

        Args:
            pairs: Dictionary of key-value pairs to print
        """
        kv_string = " | ".join([f"{k}={v}" for k, v in pairs.items()])
        _log(f"[KV] {kv_string}")

    @staticmethod
    def set_log_file(path) -> None:
        """
        Also append every message to the given file.
        Parent directories are created; passing None stops file logging.
        """
        global _log_file, _log_file_path
        if _log_file is not None:
            _log_file.close()
            _log_file = None
            _log_file_path = None
        if path is None:
            return
        _log_file_path = Path(path)
        _log_file_path.parent.mkdir(parents=True, exist_ok=True)
        _log_file = open(_log_file_path, 'a', encoding='utf-8')

    @staticmethod
    def get_log_path() -> Optional[str]:
        """Get the path to the current log file, if any."""
        return str(_log_file_path) if _log_file_path is not None else None
