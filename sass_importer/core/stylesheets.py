# sass_importer/core/stylesheets.py
import re
from pathlib import PurePosixPath
from typing import Optional, Tuple, Union

SASS_FILE_PATTERN = re.compile(r"\.s[ac]ss$")
STYLESHEET_EXTENSIONS = (".scss", ".sass")


def is_sass_file(file_path: Union[str, PurePosixPath, None]) -> bool:
    # true when the path names a .scss or .sass file.
    if file_path is None:
        return False
    return SASS_FILE_PATTERN.search(str(file_path)) is not None


def split_path_name(path_name: str) -> Tuple[Optional[str], str]:
    """Split a sub-path into its directory part and base name.

    The directory part is None when the sub-path has no "/" at all, so that
    callers can tell "widget" apart from "./widget".
    """
    if "/" not in path_name:
        return None, path_name
    posix = PurePosixPath(path_name)
    return str(posix.parent), posix.name
