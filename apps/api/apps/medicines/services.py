"""
Catalog search.

Full-text search (PostgreSQL tsvector, ranked) is tried first. If it raises
(no text search support on the backend) or finds nothing, a literal
case-insensitive substring match on name, composition and manufacturer
takes over. Errors from the substring path propagate to the caller.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from django.contrib.postgres.search import SearchQuery, SearchRank, SearchVector
from django.db import transaction
from django.db.models import Q

from apps.core.observability import metrics
from apps.core.observability.events import log_search_fallback
from .models import Medicine

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 20
QUERY_TOO_SHORT = 'Search query too short'

SEARCH_FIELDS = ('name', 'composition', 'description', 'manufacturer')
SEARCH_CONFIG = 'english'
SUBSTRING_FIELDS = ('name', 'composition', 'manufacturer')


@dataclass
class SearchResult:
    items: List[Medicine] = field(default_factory=list)
    strategy: Optional[str] = None
    message: Optional[str] = None


def normalize_query(query):
    return (query or '').strip()


def fulltext_search(query):
    """Relevance-ranked search over the text search vector."""
    vector = SearchVector(*SEARCH_FIELDS, config=SEARCH_CONFIG)
    search_query = SearchQuery(query, config=SEARCH_CONFIG)
    # Savepoint: a failed query must not poison the surrounding transaction
    with transaction.atomic():
        return list(
            Medicine.objects
            .annotate(search=vector, rank=SearchRank(vector, search_query))
            .filter(search=search_query)
            .order_by('-rank', 'id')[:MAX_RESULTS]
        )


def substring_search(query):
    """Case-insensitive literal substring match (LIKE wildcards are escaped by the ORM)."""
    condition = Q()
    for field_name in SUBSTRING_FIELDS:
        condition |= Q(**{f'{field_name}__icontains': query})
    return list(Medicine.objects.filter(condition).order_by('id')[:MAX_RESULTS])


def search_medicines(query):
    """
    Search the catalog.

    Returns a SearchResult. Queries shorter than two characters (after
    trimming) return no items and a notice instead of an error. The
    substring fallback matches the query as given, surrounding whitespace
    included.
    """
    raw = query or ''
    query = normalize_query(raw)
    if len(query) < MIN_QUERY_LENGTH:
        return SearchResult(items=[], message=QUERY_TOO_SHORT)

    start = time.time()
    try:
        items = fulltext_search(query)
        strategy = 'fulltext'
    except Exception as e:
        log_search_fallback(e)
        items = []

    if not items:
        items = substring_search(raw)
        strategy = 'substring'

    metrics.medicine_search_total.labels(strategy=strategy).inc()
    metrics.medicine_search_duration_seconds.observe(time.time() - start)
    logger.debug(
        'Medicine search completed',
        extra={'event': 'medicine_search', 'strategy': strategy, 'results': len(items)}
    )
    return SearchResult(items=items, strategy=strategy)
