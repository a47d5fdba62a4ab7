"""Icon keys for tree nodes."""

from devtree.core.pathcmp import file_extension

FOLDER = "folder"
FOLDER_LOCKED = "folder-locked"
DEFAULT_FILE = "file"

# Icon key -> extensions it covers
ICON_EXTENSIONS: dict[str, frozenset[str]] = {
    "code": frozenset(
        {
            ".py", ".pyi", ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx",
            ".cs", ".fs", ".vb", ".java", ".kt", ".kts", ".scala", ".go",
            ".rs", ".rb", ".php", ".c", ".h", ".cpp", ".hpp", ".cc",
            ".swift", ".dart", ".lua", ".sh", ".bash", ".ps1", ".sql",
        }
    ),  # fmt: skip
    "markup": frozenset(
        {".html", ".htm", ".xml", ".xaml", ".axaml", ".svg", ".vue", ".svelte", ".css", ".scss"}
    ),
    "config": frozenset(
        {
            ".json", ".toml", ".yaml", ".yml", ".ini", ".cfg", ".conf", ".env",
            ".editorconfig", ".gitignore", ".gitattributes", ".lock", ".props",
            ".csproj", ".sln",
        }
    ),  # fmt: skip
    "image": frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".tiff"}),
    "archive": frozenset({".zip", ".tar", ".gz", ".tgz", ".bz2", ".xz", ".7z", ".rar", ".jar"}),
    "text": frozenset({".md", ".markdown", ".txt", ".rst", ".adoc", ".log", ".csv"}),
}

_ICON_BY_EXTENSION: dict[str, str] = {
    extension: key for key, extensions in ICON_EXTENSIONS.items() for extension in extensions
}


def icon_key_for(name: str, is_directory: bool, is_access_denied: bool = False) -> str:
    """Return the icon key for an entry.

    Args:
        name: Bare entry name.
        is_directory: True for directories.
        is_access_denied: True if the directory could not be listed.

    Returns:
        One of ``folder``, ``folder-locked``, ``code``, ``markup``,
        ``config``, ``image``, ``archive``, ``text`` or ``file``.
    """
    if is_directory:
        return FOLDER_LOCKED if is_access_denied else FOLDER
    return _ICON_BY_EXTENSION.get(file_extension(name).casefold(), DEFAULT_FILE)
