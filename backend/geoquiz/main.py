from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'status': 'OK',
        'message': 'Geography quiz server is running!',
        'endpoints': {
            'health': '/health',
            'modes': '/api/games/modes',
            'socket': '/ws',
        },
    })

@main.route('/health')
def health():
    manager = current_app.extensions['geoquiz']
    return jsonify({'status': 'healthy', 'active_sessions': len(manager.active())})
