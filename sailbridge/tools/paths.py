import os
from typing import Iterable, Optional


def normalize_path(raw: Optional[str]) -> Optional[str]:
    """Canonical absolute form of ``raw``; ``None`` when it is blank.

    Purely lexical: ``.``/``..`` are collapsed against the working directory,
    nothing on disk is consulted.
    """
    text = str(raw or "").strip()
    if not text:
        return None
    return os.path.abspath(text)


def _relative_to(path: str, root: str) -> Optional[str]:
    try:
        return os.path.relpath(path, root)
    except ValueError:
        # different drives on Windows
        return None


def is_within_allowed(target: Optional[str], allowed_paths: Iterable[str]) -> bool:
    resolved = normalize_path(target)
    if resolved is None:
        return False
    for base in allowed_paths or ():
        root = normalize_path(base)
        if root is None:
            continue
        if resolved == root:
            return True
        rel = _relative_to(resolved, root)
        if not rel or rel == os.curdir or os.path.isabs(rel):
            continue
        if rel.split(os.sep)[0] == os.pardir:
            continue
        return True
    return False


def file_extension(path: str) -> str:
    """Final dotted suffix of the file name, lower-cased (``""`` when none)."""
    name = os.path.basename(path.rstrip("/\\"))
    dot = name.rfind(".")
    if dot == -1:
        return ""
    return name[dot:].lower()


def is_forbidden_extension(path: str, forbidden_extensions: Iterable[str]) -> bool:
    ext = file_extension(path)
    if not ext or ext == ".":
        return False
    forbidden = {e.lower() for e in forbidden_extensions}
    if ext in forbidden:
        return True
    # dotfiles such as ".env.local" are listed by their full name
    name = os.path.basename(path.rstrip("/\\")).lower()
    return name.startswith(".") and name in forbidden
