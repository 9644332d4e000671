"""Local system context for prompt enrichment.

Collects:
- OS family/version and CPU architecture
- Current shell
- Working directory and home directory
- CPU model and core count, total and free memory
- A shallow, capped directory listing

Every field is optional. A source that fails is logged at debug level
and left as None; collect() itself never raises.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional, TypeVar

from shaid.utils.detection import (
    detect_arch,
    detect_cpu,
    detect_home,
    detect_memory,
    detect_os,
    detect_shell,
)

logger = logging.getLogger(__name__)

# Keeps the prompt size bounded on large directories
MAX_LISTING_ENTRIES = 50

T = TypeVar("T")


@dataclass
class SystemContext:
    """Best-effort snapshot of the local machine."""

    os_name: Optional[str] = None
    os_version: Optional[str] = None
    arch: Optional[str] = None
    shell: Optional[str] = None
    cwd: Optional[str] = None
    home_dir: Optional[str] = None
    cpu_model: Optional[str] = None
    cpu_cores: Optional[int] = None
    total_memory_mb: Optional[int] = None
    free_memory_mb: Optional[int] = None
    listing: Optional[List[str]] = field(default=None)

    def fields(self, listing: Optional[List[str]] = None) -> List[tuple]:
        """
        Return (tag, value) pairs in the fixed render order.

        Order: OS, arch, shell, cwd, home, CPU, memory, listing.
        Absent fields are skipped.
        ``listing`` replaces self.listing when given (used for truncation).
        """
        entries = self.listing if listing is None else listing

        os_text = " ".join(v for v in (self.os_name, self.os_version) if v)
        pairs = [
            ("os", os_text),
            ("arch", self.arch),
            ("shell", self.shell),
            ("working_directory", self.cwd),
            ("home_directory", self.home_dir),
            ("cpu", self._cpu_text()),
            ("memory", self._memory_text()),
            ("directory_listing", "\n".join(entries) if entries else None),
        ]
        return [(tag, value) for tag, value in pairs if value]

    def _cpu_text(self) -> Optional[str]:
        if self.cpu_model and self.cpu_cores:
            return f"{self.cpu_model} ({self.cpu_cores} cores)"
        if self.cpu_cores:
            return f"{self.cpu_cores} cores"
        return self.cpu_model

    def _memory_text(self) -> Optional[str]:
        if not self.total_memory_mb:
            return None
        if self.free_memory_mb is None:
            return f"{self.total_memory_mb} MB total"
        return f"{self.total_memory_mb} MB total, {self.free_memory_mb} MB free"

    def render(self, listing: Optional[List[str]] = None) -> str:
        """Render a <system_context> block, or "" when nothing is known."""
        return render_fields(self.fields(listing))


def render_fields(pairs: List[tuple]) -> str:
    if not pairs:
        return ""

    parts = ["<system_context>"]
    for tag, value in pairs:
        escaped = escape_xml_content(value)
        if "\n" in escaped:
            parts.append(f"  <{tag}>\n{escaped}\n  </{tag}>")
        else:
            parts.append(f"  <{tag}>{escaped}</{tag}>")
    parts.append("</system_context>")
    return "\n".join(parts)


def escape_xml_content(text: str) -> str:
    """Escape &, < and > (& first to avoid double-escaping)."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _safely(source: str, getter: Callable[[], T]) -> Optional[T]:
    try:
        return getter()
    except Exception as e:
        logger.debug("Context source '%s' unavailable: %s", source, e)
        return None


def list_directory(path: str, max_entries: int = MAX_LISTING_ENTRIES) -> List[str]:
    """
    Return sorted entry names of ``path``, directories suffixed with '/'.

    At most ``max_entries`` names are returned; when more exist a final
    "... (N more)" marker is appended.
    """
    names = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            names.append(entry.name + "/" if is_dir else entry.name)

    names.sort(key=str.lower)
    if len(names) > max_entries:
        remaining = len(names) - max_entries
        names = names[:max_entries] + [f"... ({remaining} more)"]
    return names


def collect(
    cwd: Optional[str] = None, max_entries: int = MAX_LISTING_ENTRIES
) -> SystemContext:
    """
    Gather system context. Never raises; missing pieces stay None.

    Args:
        cwd: Directory to describe (process working directory if None)
        max_entries: Cap on directory listing entries
    """
    os_info = _safely("os", detect_os) or (None, None)
    cpu_info = _safely("cpu", detect_cpu) or (None, None)
    memory_info = _safely("memory", detect_memory) or (None, None)
    working_dir = cwd if cwd is not None else _safely("cwd", os.getcwd)

    listing = None
    if working_dir:
        listing = _safely("listing", lambda: list_directory(working_dir, max_entries))

    context = SystemContext(
        os_name=os_info[0],
        os_version=os_info[1],
        arch=_safely("arch", detect_arch),
        shell=_safely("shell", detect_shell),
        cwd=working_dir,
        home_dir=_safely("home", detect_home),
        cpu_model=cpu_info[0],
        cpu_cores=cpu_info[1],
        total_memory_mb=memory_info[0],
        free_memory_mb=memory_info[1],
        listing=listing or None,
    )
    logger.debug(
        "Collected context: os=%s arch=%s shell=%s cwd=%s entries=%d",
        context.os_name,
        context.arch,
        context.shell,
        context.cwd,
        len(context.listing or []),
    )
    return context
