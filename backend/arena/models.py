from datetime import datetime, timezone

from arena import db


def _utcnow():
    return datetime.now(timezone.utc)


class Student(db.Model):
    """Player directory entry, looked up by the roll number on the card."""
    __tablename__ = 'student'
    id = db.Column(db.Integer, primary_key=True)
    roll_number = db.Column(db.String(64), unique=True, nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(128), nullable=False, default='')
    mobile = db.Column(db.String(32), nullable=False, default='')

    def to_player(self):
        return {
            'id': self.roll_number,
            'rollNumber': self.roll_number,
            'name': self.name,
            'email': self.email,
            'mobile': self.mobile,
        }

    def to_dict(self):
        return {
            'rollNumber': self.roll_number,
            'name': self.name,
            'email': self.email,
            'mobile': self.mobile,
        }


class GameRecord(db.Model):
    """A scheduled two-sided game. Written once, deleted when handed off."""
    __tablename__ = 'game_record'
    # Autoincrement id doubles as insertion order for "oldest game" lookups
    id = db.Column(db.Integer, primary_key=True)
    game_no = db.Column(db.Integer, nullable=False)
    team_one = db.Column(db.JSON, nullable=False)
    team_two = db.Column(db.JSON, nullable=False)
    play_time = db.Column(db.String(8), nullable=False)  # "HH:MM", may exceed 23 after midnight
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'game_no': self.game_no,
            'team_one': list(self.team_one or []),
            'team_two': list(self.team_two or []),
            'play_time': self.play_time,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
