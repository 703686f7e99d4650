import logging

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)


class AnalyticsCache:
    """
    Short-lived cache of daily sales reports.

    Entries are keyed by date range and a generation number. Bumping the
    generation on every order write makes all earlier entries unreachable,
    and they then simply expire.
    """
    generation_key = 'analytics:generation'

    def __init__(self, alias='default', timeout=None):
        self.alias = alias
        self.timeout = settings.ANALYTICS_CACHE_TIMEOUT if timeout is None else timeout

    @property
    def backend(self):
        return caches[self.alias]

    def _generation(self):
        generation = self.backend.get(self.generation_key)
        if generation is None:
            generation = 1
            self.backend.add(self.generation_key, generation, None)
        return generation

    def key_for(self, start_date, end_date):
        return f'analytics:daily:{self._generation()}:{start_date.isoformat()}:{end_date.isoformat()}'

    def get(self, start_date, end_date):
        return self.backend.get(self.key_for(start_date, end_date))

    def set(self, start_date, end_date, report):
        self.backend.set(self.key_for(start_date, end_date), report, self.timeout)

    def get_or_build(self, start_date, end_date, builder, refresh=False):
        """Return the cached report, building and storing it on a miss or when ``refresh`` is set"""
        if not refresh:
            report = self.get(start_date, end_date)
            if report is not None:
                logger.debug("Analytics cache hit for %s..%s", start_date, end_date)
                return report

        report = builder(start_date, end_date)
        self.set(start_date, end_date, report)
        return report

    def invalidate(self):
        try:
            self.backend.incr(self.generation_key)
        except ValueError:
            self.backend.set(self.generation_key, 2, None)

