"""
School Marksheet System
Main Flask application entry point
"""

import logging
import os

from flask import Flask, jsonify
from flask_wtf.csrf import CSRFProtect

from config import Config
from database import db, init_db
from services.errors import ReportError
from services.pdf_engine import EnginePool

csrf = CSRFProtect()

def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    logging.getLogger().setLevel(level)
    app.logger.setLevel(level)

def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Initialize extensions with app
    db.init_app(app)
    csrf.init_app(app)

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # One engine pool per application; routes borrow engines per request
    app.extensions['engine_pool'] = EnginePool(
        size=app.config.get('REPORT_ENGINE_POOL_SIZE', 1),
        font_path=app.config.get('REPORT_FONT_PATH')
    )

    # Register blueprints
    from routes.auth import auth_bp
    from routes.management import management_bp
    from routes.marks import marks_bp
    from routes.reports import reports_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(management_bp, url_prefix='/api')
    app.register_blueprint(marks_bp, url_prefix='/api')
    app.register_blueprint(reports_bp, url_prefix='/api')

    @app.errorhandler(ReportError)
    def handle_report_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(413)
    def handle_too_large(error):
        return jsonify({'success': False, 'message': 'Uploaded file is too large'}), 413

    # Initialize database
    init_db(app)

    app.logger.info("Application started with database %s", app.config['SQLALCHEMY_DATABASE_URI'])
    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=True, use_reloader=False)
