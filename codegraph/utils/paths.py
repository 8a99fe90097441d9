"""Path helpers that treat ``/`` and ``\\`` alike, independent of the host OS."""

import re


def _file_name(path: str) -> str:
    return path.replace("\\", "/").split("/")[-1]


def extname(path: str) -> str:
    """Return the extension of ``path`` including the dot, or ``""``.

    Dot-files such as ``.env`` have no extension.
    """
    file_name = _file_name(path)
    last_dot = file_name.rfind(".")
    if last_dot <= 0:
        return ""
    return file_name[last_dot:]


def basename(path: str, ext: str = "") -> str:
    """Return the final path component, optionally stripping ``ext``."""
    file_name = _file_name(path)
    if ext and file_name.endswith(ext):
        file_name = file_name[: -len(ext)]
    return file_name


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and make sure it starts with a dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def is_same_or_child(path: str, prefix: str) -> bool:
    """True if ``path`` equals ``prefix`` or lies beneath it as a directory."""
    path = path.replace("\\", "/")
    prefix = prefix.replace("\\", "/").rstrip("/")
    if not prefix:
        return False
    return path == prefix or path.startswith(prefix + "/")


_INVALID_ID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_identifier(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with ``_``."""
    return _INVALID_ID_CHARS.sub("_", name)
