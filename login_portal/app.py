import os
from functools import partial

import click
from flask import Flask, Response, jsonify, redirect, render_template, request, session

from login_portal import config as portal_config
from login_portal.auth import authenticate, policy_from_config
from login_portal.credentials import payload_from_request, resolve
from login_portal.database import (
    StoreUnavailable,
    find_account,
    init_db,
    insert_account_if_absent,
    seed_default_account,
)
from login_portal.session_gate import SessionGate
from login_portal.utils import setup_logging


def create_app(test_config=None):
    """Build the portal application. ``test_config`` overrides settings from config.py."""
    template_dir = os.path.join(os.path.dirname(__file__), 'templates')
    app = Flask(__name__, template_folder=template_dir)
    app.config.from_mapping(portal_config.as_flask_config())
    if test_config:
        app.config.from_mapping(test_config)

    # Policy and gate are fixed for the life of the process
    policy = policy_from_config(app.config)
    gate = SessionGate(private_paths=app.config['PRIVATE_PATHS'],
                       login_path=app.config['LOGIN_PATH'])
    db_path = app.config['DATABASE_PATH']
    lookup = partial(find_account, db_path=db_path)

    # Initialize database on startup (non-blocking)
    try:
        init_db(db_path)
        if seed_default_account(db_path, app.config['SEED_USERNAME'], app.config['SEED_PASSWORD']):
            app.logger.info(f"Seeded initial account '{app.config['SEED_USERNAME']}'")
        app.logger.info("Database initialized successfully")
    except StoreUnavailable as e:
        app.logger.error(f"Database initialization error: {e}")

    @app.before_request
    def require_login():
        decision = gate.guard(request.path, session, request.method)
        if not decision.allowed:
            return redirect(decision.redirect_to)

    @app.route('/health')
    @app.route('/salud')
    def health():
        return Response("ok", status=200, mimetype='text/plain')

    @app.route('/')
    def index():
        if gate.is_authenticated(session):
            return redirect(app.config['HOME_PATH'])
        return redirect(app.config['LOGIN_PATH'])

    @app.route('/login', methods=['GET'])
    def login_page():
        return render_template('login.html', username_only=policy.identifier_only_allowed)

    @app.route('/login', methods=['POST'])
    def login():
        creds = resolve(payload_from_request(request))
        result = authenticate(creds.identifier, creds.secret, policy, lookup)

        if not result.ok:
            reason = result.reason
            if reason.status >= 500:
                # Logged in authenticate
                return jsonify({"error": reason.code}), reason.status
            return jsonify({"error": reason.code, "detail": reason.detail}), reason.status

        gate.issue(session, result.session)
        return redirect(app.config['HOME_PATH'])

    @app.route('/logout', methods=['POST'])
    def logout():
        gate.destroy(session)
        return jsonify({"ok": True})

    @app.route('/whoami')
    def whoami():
        return jsonify(gate.who_am_i(session))

    @app.route('/home')
    def home():
        return render_template('home.html', identifier=session.get('identifier'))

    @app.route('/history')
    def history():
        return render_template('history.html', identifier=session.get('identifier'))

    @app.cli.command('init-db')
    def init_db_command():
        """Create the users table and migrate any legacy table."""
        migrated = init_db(db_path)
        click.echo(f"Database ready at {db_path} ({migrated} legacy account(s) migrated)")

    @app.cli.command('add-account')
    @click.argument('username')
    @click.option('--password', default='', help='Plain-text password; empty allows username-only login.')
    def add_account_command(username, password):
        """Provision an account if the username is free."""
        init_db(db_path)
        if insert_account_if_absent(username.strip(), password, db_path):
            click.echo(f"Created account '{username.strip()}'")
        else:
            click.echo(f"Account '{username.strip()}' already exists")

    return app


# Run the application
if __name__ == '__main__':
    setup_logging(portal_config.LOG_FILE, portal_config.LOG_LEVEL)
    app = create_app()
    app.logger.info(
        f"Server listening on http://{portal_config.HOST}:{portal_config.PORT} "
        f"(username-only={portal_config.ALLOW_USERNAME_ONLY})"
    )
    app.run(host=portal_config.HOST, port=portal_config.PORT, debug=False, threaded=True, use_reloader=False)
