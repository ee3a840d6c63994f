import codecs
import datetime
import logging
import os
import stat
from dataclasses import dataclass, field
from typing import Iterable, List

from sailbridge.errors import FileTooLarge, InternalError, InvalidRequest, NotFound

logger = logging.getLogger("bridge.files")

DIR_MARK = "📁 "
FILE_MARK = "📄 "
SCAN_TRUNCATED = "…(truncated)"
READ_TRUNCATED = "... (truncated)"


# ---- Directory tree ----------------------------------------------------------
@dataclass
class ScanResult:
    lines: List[str] = field(default_factory=list)
    entries: int = 0
    truncated: bool = False


def scan_dir_tree(root_dir: str, max_depth: int, max_entries: int, ignored_dirs: Iterable[str] = ()) -> ScanResult:
    """Depth-first, name-sorted listing of ``root_dir``.

    Every visited entry counts against ``max_entries``; once the budget is spent
    and another entry is pending the whole walk stops and a single marker line
    is appended. Directories are expanded while ``depth + 1 <= max_depth``.
    Entries or directories that cannot be read are skipped.
    """
    ignored = set(ignored_dirs)
    result = ScanResult()

    def walk(directory: str, depth: int, prefix: str) -> None:
        try:
            names = sorted(os.listdir(directory))
        except OSError:
            return

        for name in names:
            if result.truncated:
                return
            if name in ignored:
                continue
            if result.entries >= max_entries:
                result.truncated = True
                return

            full_path = os.path.join(directory, name)
            try:
                st = os.stat(full_path)
            except OSError:
                continue

            result.entries += 1
            is_dir = stat.S_ISDIR(st.st_mode)
            result.lines.append(f"{prefix}{DIR_MARK if is_dir else FILE_MARK}{name}")

            # symlinked directories are listed but never entered
            if is_dir and depth + 1 <= max_depth and not os.path.islink(full_path):
                walk(full_path, depth + 1, prefix + "  ")

    walk(root_dir, 0, "")

    if result.truncated:
        result.lines.append(SCAN_TRUNCATED)
    return result


# ---- Bounded read ------------------------------------------------------------
@dataclass
class ReadResult:
    content: str
    size: int
    last_modified: str
    lines: int
    truncated: bool

    def metadata(self) -> dict:
        return {
            "size": self.size,
            "lastModified": self.last_modified,
            "lines": self.lines,
            "truncated": self.truncated,
        }


def check_encoding(encoding: str) -> str:
    try:
        name = codecs.lookup(encoding).name
        # bytes-to-bytes codecs (hex, base64, rot_13) are not text encodings
        b"".decode(name)
    except (LookupError, TypeError):
        raise InvalidRequest(f"Unsupported encoding: {encoding}")
    return name


def _iso_mtime(ts: float) -> str:
    dt = datetime.datetime.fromtimestamp(ts, tz=datetime.timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def truncate_lines(content: str, max_lines: int):
    """Keep the first ``max_lines`` newline-separated segments plus a marker.

    A trailing newline leaves an empty final segment, which counts as a line.
    """
    if not max_lines or max_lines <= 0:
        return content, False
    segments = content.split("\n")
    if len(segments) <= max_lines:
        return content, False
    return "\n".join(segments[:max_lines] + [READ_TRUNCATED]), True


def read_bounded(path: str, max_file_size: int, max_lines: int, encoding: str = "utf-8") -> ReadResult:
    """Read a text file without exceeding ``max_file_size`` bytes of I/O.

    The size check uses ``stat`` only; file bytes are read after it passes.
    Callers are expected to have authorized ``path`` already.
    """
    encoding = check_encoding(encoding)
    if not os.path.exists(path):
        raise NotFound("File not found", path=path)
    if not os.path.isfile(path):
        raise InvalidRequest("Path is not a file", path=path)

    try:
        st = os.stat(path)
    except FileNotFoundError:
        raise NotFound("File not found", path=path)
    except OSError as e:
        raise InternalError(f"Failed to stat file: {e.strerror or e}")

    if st.st_size > max_file_size:
        logger.warning(f"[read] refused {path}: {st.st_size} bytes > {max_file_size}")
        raise FileTooLarge(st.st_size, max_file_size)

    try:
        with open(path, "r", encoding=encoding, errors="replace", newline="") as f:
            content = f.read()
    except FileNotFoundError:
        raise NotFound("File not found", path=path)
    except LookupError:
        raise InvalidRequest(f"Unsupported encoding: {encoding}")
    except OSError as e:
        raise InternalError(f"Failed to read file: {e.strerror or e}")

    final, truncated = truncate_lines(content, max_lines)
    return ReadResult(
        content=final,
        size=st.st_size,
        last_modified=_iso_mtime(st.st_mtime),
        lines=len(final.split("\n")),
        truncated=truncated,
    )
