"""
Availability Service
Keeps the current availability snapshot and refreshes it on change events
"""

import threading
from datetime import datetime, timedelta

from flask import current_app

from app.services.availability_store import AvailabilityStore

WATCHED_TABLES = ('bookings', 'blocked_dates', 'vans')
MAX_LOAD_ATTEMPTS = 3


class AvailabilityService:
    """
    Serves availability queries from a cached snapshot.

    The snapshot is loaded from the store on first use and dropped whenever
    the change feed reports a change to bookings, blocked dates or vans, so
    the next query re-fetches it. A load that overlaps a change notice is
    thrown away and repeated. Changes made by other processes never reach
    this feed, so snapshots older than max_age are reloaded as well.
    """

    def __init__(self, store_factory, change_feed=None, max_age=None):
        self.store_factory = store_factory
        self.max_age = max_age
        self._snapshot = None
        self._generation = 0
        self._lock = threading.RLock()
        if change_feed is not None:
            for table in WATCHED_TABLES:
                change_feed.subscribe(table, self.on_change)

    def _is_fresh(self, snapshot):
        if snapshot is None:
            return False
        if self.max_age is None or snapshot.loaded_at is None:
            return True
        return datetime.utcnow() - snapshot.loaded_at < self.max_age

    def snapshot(self):
        snapshot = self._snapshot
        if self._is_fresh(snapshot):
            return snapshot

        with self._lock:
            if self._is_fresh(self._snapshot):
                return self._snapshot

            for _ in range(MAX_LOAD_ATTEMPTS):
                generation = self._generation
                snapshot = self.store_factory().load_snapshot()
                if generation == self._generation:
                    self._snapshot = snapshot
                    current_app.logger.debug(
                        f'Loaded availability snapshot: {len(snapshot.blocked_periods)} blocked periods, '
                        f'{len(snapshot.bookings)} bookings, {len(snapshot.vans)} vans'
                    )
                    break
                current_app.logger.debug('Availability changed while loading, reloading snapshot')
            else:
                current_app.logger.warning(
                    f'Availability kept changing over {MAX_LOAD_ATTEMPTS} loads, serving an uncached snapshot'
                )
            return snapshot

    def invalidate(self):
        with self._lock:
            self._generation += 1
            self._snapshot = None

    def on_change(self, change):
        current_app.logger.debug(f'{change.table}.{change.event} received, dropping availability snapshot')
        self.invalidate()


def init_availability(app, change_feed):
    """Attach an AvailabilityService bound to the app's database session"""
    from extensions import db

    max_age = app.config.get('AVAILABILITY_SNAPSHOT_MAX_AGE')
    service = AvailabilityService(
        lambda: AvailabilityStore(db.session),
        change_feed,
        max_age=timedelta(seconds=max_age) if max_age else None,
    )
    app.extensions['availability'] = service
    return service


def get_availability_service():
    return current_app.extensions['availability']
