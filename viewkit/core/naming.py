# viewkit/core/naming.py
import posixpath

def resolve_name(path: str, suffix: str, root: str = "") -> str:
    """
    Maps a template file path to its logical name.

    The root prefix (if any) and the suffix are removed and separators are
    normalized to '/', so 'views\\errors\\404.html' with root 'views' and
    suffix '.html' becomes 'errors/404' on every host.
    """
    normalized = path.replace("\\", "/")
    if root:
        root_normalized = root.replace("\\", "/").rstrip("/")
        if normalized == root_normalized or normalized.startswith(root_normalized + "/"):
            normalized = normalized[len(root_normalized):]

    if not normalized.endswith(suffix):
        raise ValueError(f"template path '{path}' does not end with '{suffix}'")
    normalized = normalized[: len(normalized) - len(suffix)] if suffix else normalized

    # collapses './' segments and doubled separators without touching '..'.
    parts = [p for p in normalized.split("/") if p not in ("", ".")]
    name = posixpath.join(*parts) if parts else ""
    if not name:
        raise ValueError(f"template path '{path}' has an empty name")
    return name
