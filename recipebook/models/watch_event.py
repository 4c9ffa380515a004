# recipebook/models/watch_event.py
from ..extensions import db
from ..utils.clock import utcnow


class WatchEvent(db.Model):
    __tablename__ = 'watch_events'
    __table_args__ = (
        db.Index('idx_watch_events_recent', 'user_id', 'watched_at'),
    )

    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), primary_key=True)
    recipe_id = db.Column(db.String(50), primary_key=True)
    is_external = db.Column(db.Boolean, primary_key=True)
    watched_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'recipe_id': self.recipe_id,
            'isExternal': self.is_external,
            'watched_at': self.watched_at.isoformat() if self.watched_at else None
        }
