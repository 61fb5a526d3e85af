"""Full-text search over parsed documentation."""

from .storage import FieldWeights, SearchHit, SearchIndex, SearchIndexConfig, SearchIndexEntry
from .query import ParsedQuery, QueryTerm, parse_query
from .index import IndexBuildResult, IndexHolder, SearchIndexBuilder
from .engine import SearchEngine, SearchEngineConfig
from .watcher import StalenessChecker

__all__ = [
    "FieldWeights",
    "IndexBuildResult",
    "IndexHolder",
    "ParsedQuery",
    "QueryTerm",
    "SearchEngine",
    "SearchEngineConfig",
    "SearchHit",
    "SearchIndex",
    "SearchIndexBuilder",
    "SearchIndexConfig",
    "SearchIndexEntry",
    "StalenessChecker",
    "parse_query",
]
