"""
Transcribe Proxy Application Factory
"""
from datetime import datetime, timezone
from flask import Flask, jsonify
from config import config


def create_app(config_name='default'):
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Module loggers live under the "transcribe_proxy" namespace, which is app.logger
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Register blueprints
    from transcribe_proxy.api import api_bp

    app.register_blueprint(api_bp)

    # Health check endpoint
    @app.route('/healthz')
    def healthz():
        """Health check for load balancers and monitoring"""
        bucket_ready = bool((app.config.get('TEMP_BUCKET') or '').strip())
        return jsonify({
            "status": "ok" if bucket_ready else "degraded",
            "version": app.config.get('APP_VERSION'),
            "temp_bucket_configured": bucket_ready,
            "timestamp": datetime.now(timezone.utc).isoformat()
        })

    # Version endpoint
    @app.route('/version')
    def version():
        """Version and build info"""
        return jsonify({
            "version": app.config.get('APP_VERSION'),
            "build_time": app.config.get('BUILD_TIME'),
            "git_commit": app.config.get('GIT_COMMIT'),
        })

    return app
