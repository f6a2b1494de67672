from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from arena import db
from arena.models import Student
from arena.services.games.errors import StorageUnavailable

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the laser tag arena server!'})


@main.route('/health')
def health():
    return jsonify({'ok': True, 'time': datetime.now(timezone.utc).isoformat()})


@main.route('/students/<string:roll_number>')
def get_student(roll_number):
    roll_number = roll_number.strip()
    if not roll_number:
        return jsonify({'error': 'Roll number is required'}), 400
    current_app.logger.info(f"[lookup] roll={roll_number}")
    try:
        player = current_app.extensions['arena'].directory.resolve(roll_number)
    except StorageUnavailable:
        return jsonify({'error': 'Internal server error'}), 500
    if not player:
        return jsonify({'error': f'Student with roll number {roll_number} not found'}), 404
    player.pop('id', None)
    return jsonify(player)


@main.route('/students')
def list_students():
    try:
        students = Student.query.order_by(Student.id.asc()).limit(1000).all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"Error fetching students: {exc}")
        return jsonify({'error': 'Internal server error'}), 500
    return jsonify([s.to_dict() for s in students])
