_LANGUAGE_ALIASES = {
    "cjs": "javascript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "node": "javascript",
    "cts": "typescript",
    "mts": "typescript",
    "ts": "typescript",
    "tsx": "typescript",
    "json5": "jsonc",
    "htm": "html",
    "md": "markdown",
    "mdx": "markdown",
    "yml": "yaml",
    "gql": "graphql",
    "sh": "bash",
    "shell": "bash",
    "zsh": "bash",
    "py": "python",
    "rb": "ruby",
    "rs": "rust",
    "golang": "go",
}

_SYNTAX_VARIANTS = frozenset({"jsx", "tsx"})

_LANGUAGE_DEFAULT_EXTENSIONS = {
    "css": ".css",
    "graphql": ".graphql",
    "html": ".html",
    "javascript": ".js",
    "json": ".json",
    "jsonc": ".jsonc",
    "jsx": ".jsx",
    "less": ".less",
    "markdown": ".md",
    "scss": ".scss",
    "tsx": ".tsx",
    "typescript": ".ts",
    "yaml": ".yaml",
}


def normalize_language(language: str | None) -> str:
    """Lower-case an info-string language tag and resolve common aliases.

    ``None`` and blank tags normalise to ``""``.
    """
    if not language:
        return ""
    normalized = language.strip().lower()
    return _LANGUAGE_ALIASES.get(normalized, normalized)


def tag_from_info(info: str) -> str:
    """Return the raw language tag of a fence info string (its first word)."""
    parts = info.strip().split(maxsplit=1)
    if not parts:
        return ""
    # ```{python} and ```js{1,3} style attributes
    return parts[0].strip("{}").split("{", 1)[0]


def language_from_info(info: str) -> str:
    """Return the normalised language of a fence info string."""
    return normalize_language(tag_from_info(info))


def syntax_for(language: str | None) -> str:
    """Like ``normalize_language`` but keeps the JSX and TSX variants apart.

    Formatters need the variant to pick a parser; routing falls back from
    the variant to its base language.
    """
    if not language:
        return ""
    tag = language.strip().lower()
    return tag if tag in _SYNTAX_VARIANTS else normalize_language(tag)


def filename_hint(language: str, stem: str = "snippet") -> str:
    """File name used to tell a formatter which syntax to expect."""
    suffix = _LANGUAGE_DEFAULT_EXTENSIONS.get(language, ".txt")
    return f"{stem}{suffix}"
