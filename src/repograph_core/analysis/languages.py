"""
Language classification by file extension.

Contains the closed set of language tags, the extension mapping used to pick
a per-file analyzer, and the allow-list of extensions the archive loader
admits.
"""

from typing import Dict, FrozenSet, Tuple

# =============================================================================
# LANGUAGE TAGS
# =============================================================================

OTHER = "Other"

LANGUAGES: Tuple[str, ...] = (
    "javascript",
    "typescript",
    "python",
    "java",
    "c",
    "cpp",
    "json",
    "markdown",
    "css",
    "html",
    "yaml",
    "text",
    "go",
    "rust",
    "php",
    "ruby",
    OTHER,
)


# =============================================================================
# LANGUAGE EXTENSIONS MAPPING
# =============================================================================
# Extensions are lower-case and without the leading dot.

LANGUAGE_EXTENSIONS: Dict[str, Tuple[str, ...]] = {
    "javascript": ("js", "jsx", "mjs", "cjs"),
    "typescript": ("ts", "tsx"),
    "python": ("py",),
    "java": ("java",),
    "c": ("c", "h"),
    "cpp": ("cpp", "hpp", "cc"),
    "json": ("json",),
    "markdown": ("md",),
    "css": ("css",),
    "html": ("html",),
    "yaml": ("yaml", "yml"),
    "text": ("txt",),
    "go": ("go",),
    "rust": ("rs",),
    "php": ("php",),
    "ruby": ("rb",),
}

EXTENSION_TO_LANGUAGE: Dict[str, str] = {
    ext: lang for lang, extensions in LANGUAGE_EXTENSIONS.items() for ext in extensions
}


# =============================================================================
# ARCHIVE ALLOW-LIST
# =============================================================================
# Recognized code extensions. Documentation (md), plain text and data formats
# other than json are not graph nodes.

CODE_EXTENSIONS: FrozenSet[str] = frozenset(
    {
        "js",
        "jsx",
        "mjs",
        "cjs",
        "ts",
        "tsx",
        "py",
        "java",
        "c",
        "h",
        "cpp",
        "cc",
        "hpp",
        "json",
        "css",
        "html",
        "go",
        "rs",
    }
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def get_extension(filename: str) -> str:
    """
    Return the lower-cased extension of ``filename`` without the dot.

    Only the basename is considered, so dots in directory names are ignored.
    Files without a dot (``Makefile``) have an empty extension.

    Examples:
        >>> get_extension("src/App.TSX")
        'tsx'
        >>> get_extension("Makefile")
        ''
    """
    basename = filename.rsplit("/", 1)[-1]
    if "." not in basename:
        return ""
    return basename.rsplit(".", 1)[-1].lower()


def get_language_from_extension(filename: str) -> str:
    """
    Map a filename (or bare extension) to its language tag.

    Args:
        filename: File path or name, e.g. "src/main.py" or "main.RS".
                  A bare extension such as "py" is also accepted.

    Returns:
        One of LANGUAGES; unknown extensions map to "Other".

    Examples:
        >>> get_language_from_extension("index.jsx")
        'javascript'
        >>> get_language_from_extension("lib.hpp")
        'cpp'
        >>> get_language_from_extension("archive.tar")
        'Other'
    """
    ext = get_extension(filename) or filename.lower()
    return EXTENSION_TO_LANGUAGE.get(ext, OTHER)
