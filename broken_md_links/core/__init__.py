"""Link resolution and header slug engine."""

from .cache import SlugCache
from .checker import FileChecker, check_file
from .config import CheckerOptions, load_options
from .errors import BrokenLinksError, CheckerError, CheckerIOError, DetectedBrokenLink
from .links import LinkKind, LinkTarget, classify_link, split_target
from .paths import canonicalize, simplify_path
from .slugs import generate_slugs, slugify
from .walker import DirectoryWalker, check_broken_links, check_dir

__all__ = [
    "BrokenLinksError",
    "CheckerError",
    "CheckerIOError",
    "CheckerOptions",
    "DetectedBrokenLink",
    "DirectoryWalker",
    "FileChecker",
    "LinkKind",
    "LinkTarget",
    "SlugCache",
    "canonicalize",
    "check_broken_links",
    "check_dir",
    "check_file",
    "classify_link",
    "generate_slugs",
    "load_options",
    "simplify_path",
    "slugify",
    "split_target",
]
