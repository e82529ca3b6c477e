from datetime import datetime, timezone

import click
from flask import Flask, current_app, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.security import generate_password_hash

from config import Config
from database.db import db
from routes.alert_routes import alert_bp
from routes.auth_routes import auth_bp
from routes.dashboard_routes import dashboard_bp
from routes.farm_routes import farm_bp
from routes.land_routes import land_bp
from routes.park_routes import park_bp
from routes.report_routes import report_bp
from routes.user_routes import user_bp
from services.errors import ApiError
from services.observability import setup_observability


def _register_jwt_handlers(jwt):
    def unauthorized(message, status=401):
        return jsonify({'success': False, 'message': message}), status

    @jwt.unauthorized_loader
    def missing_token(reason):
        return unauthorized('Authentication required')

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return unauthorized('Invalid token')

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return unauthorized('Token has expired')


def _register_cli(app):
    @app.cli.command('create-admin')
    @click.argument('email')
    @click.argument('password')
    @click.option('--first-name', default='Admin')
    @click.option('--last-name', default='User')
    def create_admin(email, password, first_name, last_name):
        """Create an ACTIVE admin account."""
        from database.models import User

        if User.query.filter_by(email=email).first():
            raise click.ClickException(f"User {email} already exists")

        admin = User(
            email=email,
            password_hash=generate_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            role='ADMIN',
            status='ACTIVE',
        )
        db.session.add(admin)
        db.session.commit()
        click.echo(f"Admin {email} created ({admin.id})")


def create_app(config_class=Config, **overrides):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config.update(overrides)

    jwt = JWTManager(app)
    _register_jwt_handlers(jwt)

    db.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    # ── Observability ──
    setup_observability(app)

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify({'success': False, 'message': e.message}), e.status_code

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(farm_bp)
    app.register_blueprint(park_bp)
    app.register_blueprint(land_bp)
    app.register_blueprint(alert_bp)
    app.register_blueprint(report_bp)
    app.register_blueprint(dashboard_bp)

    with app.app_context():
        from database import models  # noqa: F401  (registers tables)
        db.create_all()

    _register_cli(app)

    @app.route('/health')
    def health():
        return jsonify({
            'status': 'ok',
            'message': 'KUBE Platform API is running',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'version': current_app.config['API_VERSION'],
        })

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5000)
