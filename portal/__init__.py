import click
from flask import Flask, jsonify
from flask_migrate import Migrate

from .errors import AuthenticationError, PortalError
from .extensions import db, login_manager, rq

migrate = Migrate()


def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    migrate.init_app(app, db, directory='alembic')
    login_manager.init_app(app)
    rq.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import User
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        raise AuthenticationError()

    @app.errorhandler(PortalError)
    def handle_portal_error(e):
        if e.status_code >= 500:
            app.logger.exception('Unhandled portal error')
        return jsonify(e.to_dict()), e.status_code

    from .blueprints.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")

    from .blueprints.org import bp as org_bp
    app.register_blueprint(org_bp, url_prefix="/org")

    from .blueprints.cycles import bp as cycles_bp
    app.register_blueprint(cycles_bp, url_prefix="/cycles")

    from .blueprints.applications import bp as applications_bp
    app.register_blueprint(applications_bp, url_prefix="/applications")

    from .blueprints.availabilities import bp as availabilities_bp
    app.register_blueprint(availabilities_bp, url_prefix="/availabilities")

    from .blueprints.interviews import bp as interviews_bp
    app.register_blueprint(interviews_bp, url_prefix="/interviews")

    from .blueprints.events import bp as events_bp
    app.register_blueprint(events_bp, url_prefix="/events")

    from .blueprints.messages import bp as messages_bp
    app.register_blueprint(messages_bp, url_prefix="/messages")

    from .api.cron import bp as cron_bp
    app.register_blueprint(cron_bp)

    @app.cli.command('sweep-cycles')
    def sweep_cycles():
        """Move every active cycle into its current stage window."""
        from .services.stages import sweep
        result = sweep()
        click.echo(f"cycles={result.cycles} transitions={len(result.transitions)} failed={result.failed}")
        if not result.ok:
            raise SystemExit(1)

    @app.get('/health')
    def health():
        return jsonify({"ok": True})

    return app
