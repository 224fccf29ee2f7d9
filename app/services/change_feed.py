"""
Change Feed
Announces row changes to in-process listeners and, when configured, to Pusher
"""

from dataclasses import dataclass, field
from datetime import datetime

from flask import current_app
from pusher import Pusher

ALL_TABLES = '*'


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event: str  # 'insert', 'update' or 'delete'
    record_id: object = None
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self):
        return {
            'table': self.table,
            'event': self.event,
            'record_id': self.record_id,
            'occurred_at': self.occurred_at.isoformat(),
        }


class ChangeFeed:
    """Publish/subscribe for table changes"""

    def __init__(self, app=None, pusher_client=None):
        self.pusher_client = pusher_client
        self.channel = 'admin-changes'
        self._listeners = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.channel = app.config.get('PUSHER_CHANNEL', self.channel)

        if self.pusher_client is None and app.config.get('PUSHER_APP_ID'):
            self.pusher_client = Pusher(
                app_id=app.config['PUSHER_APP_ID'],
                key=app.config['PUSHER_KEY'],
                secret=app.config['PUSHER_SECRET'],
                cluster=app.config['PUSHER_CLUSTER'],
                ssl=True
            )
        elif self.pusher_client is None:
            app.logger.warning('Pusher credentials not found. Change feed is local only.')

        app.extensions['change_feed'] = self

    def subscribe(self, table, callback):
        """Call callback(event) on every change to table ('*' for all tables)"""
        self._listeners.setdefault(table, []).append(callback)

    def unsubscribe(self, table, callback):
        listeners = self._listeners.get(table, [])
        if callback in listeners:
            listeners.remove(callback)

    def publish(self, table, event, record_id=None):
        change = ChangeEvent(table=table, event=event, record_id=record_id)

        for callback in list(self._listeners.get(table, [])) + list(self._listeners.get(ALL_TABLES, [])):
            callback(change)

        if self.pusher_client is not None:
            try:
                self.pusher_client.trigger(self.channel, f'{table}.{event}', change.to_dict())
            except Exception as e:
                # write already committed
                current_app.logger.error(f'Failed to push {table}.{event} change: {str(e)}')

        return change


def get_change_feed():
    return current_app.extensions['change_feed']
