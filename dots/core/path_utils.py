"""
Dots Core: Path helpers.

Expansion of user-supplied paths and home-relative shortening for messages.
"""
import os
from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


def expand_path(path: PathLike) -> Path:
    """Expand ~ and environment variables, then make the path absolute.

    Args:
        path: Path as written by the user

    Returns:
        Absolute path (not resolved through symlinks)
    """
    expanded = os.path.expandvars(os.path.expanduser(str(path)))
    return Path(os.path.abspath(expanded))


def shorten_path(path: PathLike, home: Optional[PathLike] = None) -> str:
    """Render a path relative to the home directory as ~/...

    Args:
        path: Path to shorten
        home: Home directory (defaults to the current user's)

    Returns:
        Shortened path, or the path unchanged when outside home
    """
    home_dir = Path(home) if home is not None else Path.home()
    candidate = Path(path)

    try:
        relative = candidate.relative_to(home_dir)
    except ValueError:
        return str(candidate)

    if str(relative) == ".":
        return "~"
    return str(Path("~") / relative)
