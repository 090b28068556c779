"""Reference content-type classifier for regular files.

Classifiers are plain callables ``(physical_path) -> Optional[str]`` handed to
the facade at construction time; none is installed by default.
"""

import mimetypes
from pathlib import Path
from typing import Callable, Optional

ContentTypeClassifier = Callable[[Path], Optional[str]]

FALLBACK_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(filepath: Path) -> str:
    """Guess a MIME type from the file name, defaulting to octet-stream."""
    mime_type, _ = mimetypes.guess_type(filepath.as_posix())
    return mime_type or FALLBACK_CONTENT_TYPE
