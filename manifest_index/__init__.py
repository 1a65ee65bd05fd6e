from .logger import setup_logger

log = setup_logger()

from .index import ManifestIndex, ManifestError, class_name, lookup_name, COMPONENT_TAGS  # noqa: E402

__all__ = [
    "log",
    "setup_logger",
    "ManifestIndex",
    "ManifestError",
    "class_name",
    "lookup_name",
    "COMPONENT_TAGS",
]
