"""
DreamLog Core
=============
Configuration, exceptions, the dream data model and the journal that owns
the collection.
"""

from .config import DreamLogConfig, get_config, load_config, reset_config
from .exceptions import DreamLogError, DreamNotFoundError, ValidationError
from .journal import DreamJournal
from .models import DEFAULT_TITLE, Dream, DraftRecord, EnrichmentResult
from .search import TagCloud, build_tag_cloud, search_dreams

__all__ = [
    "DreamLogConfig",
    "get_config",
    "load_config",
    "reset_config",
    "DreamLogError",
    "DreamNotFoundError",
    "ValidationError",
    "DreamJournal",
    "DEFAULT_TITLE",
    "Dream",
    "DraftRecord",
    "EnrichmentResult",
    "TagCloud",
    "build_tag_cloud",
    "search_dreams",
]
