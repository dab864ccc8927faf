"""Path helpers used by the compiler front end."""

import os


def expand_path(path: str) -> str:
    """Replace a leading ``$NAME`` component with the environment value.

    The first path component, less its first character, is looked up in the
    environment; if it is not set the component is kept as written.
    """
    head, sep, rest = path.partition("/")
    value = os.environ.get(head[1:]) if head[1:] else None
    head = value if value is not None else head
    return f"{head}/{rest}" if sep else head


def remove_extension(path: str) -> str:
    """Drop everything after the last dot, keeping the dot itself.

    A path without a dot becomes empty.
    """
    dot = path.rfind(".")
    return path[: dot + 1]


def output_file_name(path: str) -> str:
    """Return the name of the assembly file produced for a source file."""
    return remove_extension(path) + "xsm"