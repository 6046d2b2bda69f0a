"""Filename resolution and sanitisation for downloaded resources."""

import re

from yarl import URL

# Reserved Windows filenames that need special handling
_WINDOWS_RESERVED_NAMES = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)


def _replace_invalid_chars(filename: str) -> str:
    r"""Replace invalid filesystem characters with underscores.

    Invalid characters: < > : " / \ | ? * and control characters
    """
    return re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", filename)


def _normalize_whitespace(filename: str) -> str:
    filename = filename.strip()
    return re.sub(r"\s+", " ", filename)


def _handle_windows_reserved_names(filename: str) -> str:
    """Append underscore to reserved base names, preserving the extension."""
    base, dot, ext = filename.partition(".")
    if base.upper() in _WINDOWS_RESERVED_NAMES:
        return f"{base}_{dot}{ext}"
    return filename


def _truncate_long_filename(filename: str, max_length: int = 255) -> str:
    """Truncate filename to maximum length, preserving extension."""
    if len(filename) <= max_length:
        return filename
    if "." in filename:
        name, ext = filename.rsplit(".", 1)
        return f"{name[: max_length - len(ext) - 1]}.{ext}"
    return filename[:max_length]


def sanitize_filename(filename: str) -> str:
    """Make a server- or URL-supplied name safe to use inside the save directory.

    Any directory components are dropped first so a hostile
    Content-Disposition cannot escape the save directory.
    """
    filename = re.split(r"[/\\]", filename)[-1]
    filename = _normalize_whitespace(filename)
    filename = _replace_invalid_chars(filename)
    filename = _handle_windows_reserved_names(filename)
    filename = _truncate_long_filename(filename)
    if filename in {".", ".."}:
        return ""
    return filename


def filename_from_url(url: URL | str) -> str:
    """Last path segment of a URL, without query or fragment."""
    return URL(str(url)).name


def resolve_filename(disposition_filename: str | None, url: URL | str) -> str:
    """Pick the local filename for a resource.

    The Content-Disposition filename wins when present; otherwise the final
    path segment of the URL is used. Returns an empty string if neither
    yields a usable name.
    """
    if disposition_filename:
        candidate = sanitize_filename(disposition_filename)
        if candidate:
            return candidate
    return sanitize_filename(filename_from_url(url))
