"""
OS, shell and hardware detection utilities

Missing information comes back as None. OS errors propagate to the
caller; shaid.context.system.collect guards every call.
"""

import logging
import os
import platform
from pathlib import PureWindowsPath, PurePosixPath
from typing import Mapping, Optional, Tuple

import psutil

logger = logging.getLogger(__name__)


def detect_os() -> Tuple[Optional[str], Optional[str]]:
    """
    Detect OS family and version.

    Returns:
        tuple: (os_name, os_version)
            - os_name: Short name (macOS, Linux, Windows, or platform.system())
            - os_version: Descriptive version, None if unknown
    """
    system = platform.system()

    if system == "Darwin":
        return "macOS", platform.mac_ver()[0] or None
    elif system == "Linux":
        return "Linux", _linux_version()
    elif system == "Windows":
        version = " ".join(v for v in (platform.release(), platform.version()) if v)
        return "Windows", version or None

    return system or None, platform.release() or None


def _linux_version() -> Optional[str]:
    # /etc/os-release first, kernel release as fallback
    try:
        pretty = platform.freedesktop_os_release().get("PRETTY_NAME")
        if pretty:
            return pretty
    except OSError as e:
        logger.debug("os-release unavailable: %s", e)
    return platform.release() or None


def detect_arch() -> Optional[str]:
    return platform.machine() or None


def detect_shell(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Detect the user's shell from the environment.

    Returns:
        str: Shell name (zsh, bash, fish, powershell, cmd.exe, ...), None if unknown
    """
    environ = os.environ if environ is None else environ

    shell_path = environ.get("SHELL", "")
    if shell_path:
        return PurePosixPath(shell_path).name or None

    if platform.system() == "Windows" or environ.get("COMSPEC"):
        if environ.get("PSModulePath"):
            return "powershell"
        comspec = environ.get("COMSPEC", "")
        if comspec:
            return PureWindowsPath(comspec).name.lower()

    return None


def detect_home() -> Optional[str]:
    home = os.path.expanduser("~")
    return home if home != "~" else None


def detect_cpu() -> Tuple[Optional[str], Optional[int]]:
    """
    Detect CPU model and logical core count.

    Returns:
        tuple: (cpu_model, cpu_cores), either may be None
    """
    return _cpu_model(), psutil.cpu_count(logical=True)


def _cpu_model() -> Optional[str]:
    if platform.system() == "Linux":
        try:
            with open("/proc/cpuinfo", encoding="utf-8") as cpuinfo:
                for line in cpuinfo:
                    key, _, value = line.partition(":")
                    if key.strip() in ("model name", "Hardware", "Model") and value.strip():
                        return value.strip()
        except OSError as e:
            logger.debug("/proc/cpuinfo unavailable: %s", e)
    return platform.processor() or None


def detect_memory() -> Tuple[int, int]:
    """
    Detect total and available memory.

    Returns:
        tuple: (total_mb, free_mb)
    """
    memory = psutil.virtual_memory()
    return memory.total // (1024 * 1024), memory.available // (1024 * 1024)
