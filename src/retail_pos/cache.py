import logging
import threading
from collections import OrderedDict
from datetime import datetime, timedelta

class SummaryCache:
    """Computed summaries keyed by dataset and filters, with TTL and LRU eviction.

    Every entry is derived from the price table, so any write to prices
    must call ``invalidate()``.
    """

    def __init__(self, max_size=100, default_ttl=300):
        self.entries = OrderedDict()
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.lock = threading.RLock()
        self.hits = 0
        self.misses = 0
        self.invalidations = 0
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def make_key(dataset, **filters):
        """('daily', product=None, month='2024-01') -> ('daily', (('month', '2024-01'),))"""
        return dataset, tuple(sorted((name, value) for name, value in filters.items() if value is not None))

    def _purge_expired(self, now):
        for key in [key for key, (_, expires_at) in self.entries.items() if expires_at <= now]:
            del self.entries[key]

    def get(self, key):
        with self.lock:
            entry = self.entries.get(key)
            if entry is None or entry[1] <= datetime.now():
                self.entries.pop(key, None)
                self.misses += 1
                return None

            self.entries.move_to_end(key)
            self.hits += 1
            return entry[0]

    def set(self, key, rows, ttl=None, generation=None):
        """Store rows; skipped when ``generation`` predates the last ``invalidate()``"""
        expires_at = datetime.now() + timedelta(seconds=self.default_ttl if ttl is None else ttl)
        with self.lock:
            if generation is not None and generation != self.invalidations:
                return False
            self.entries[key] = (rows, expires_at)
            self.entries.move_to_end(key)
            self._purge_expired(datetime.now())
            while len(self.entries) > self.max_size:
                self.entries.popitem(last=False)
        return True

    def get_or_build(self, dataset, build, **filters):
        """Return cached rows for ``dataset``/``filters`` or call ``build()`` and store its result"""
        key = self.make_key(dataset, **filters)
        with self.lock:
            rows = self.get(key)
            generation = self.invalidations
        if rows is None:
            rows = build()
            if not self.set(key, rows, generation=generation):
                self.logger.debug(f"Discarded {dataset} summary built before an invalidation")
        return rows

    def invalidate(self):
        with self.lock:
            size = len(self.entries)
            self.entries.clear()
            self.invalidations += 1
        if size:
            self.logger.info(f"Invalidated {size} cached summaries")

    def get_stats(self):
        with self.lock:
            self._purge_expired(datetime.now())
            total = self.hits + self.misses
            return {
                'size': len(self.entries),
                'max_size': self.max_size,
                'ttl_seconds': self.default_ttl,
                'hits': self.hits,
                'misses': self.misses,
                'invalidations': self.invalidations,
                'hit_ratio': self.hits / total if total else 0
            }
