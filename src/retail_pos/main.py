import time
import logging
from datetime import datetime, timedelta

from flask import Flask, request, jsonify
from flask_cors import CORS
from sqlalchemy import text

from retail_pos.cache import SummaryCache
from retail_pos.config import Config
from retail_pos.database import init_database
from retail_pos.models import db
from retail_pos.monitoring import APIMonitor, setup_logging
from retail_pos.security import SecurityManager

# Import blueprints
from retail_pos.routes.prices import prices_bp
from retail_pos.routes.summary import summary_bp
from retail_pos.routes.checklist import checklist_bp
from retail_pos.routes.export import export_bp

logger = logging.getLogger(__name__)

def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    setup_logging(app.config['LOG_LEVEL'], app.config.get('LOG_FILE'))

    # Enable CORS for the API routes
    CORS(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}})

    db.init_app(app)
    init_database(app, seed=app.config.get('SEED_SAMPLE_DATA', False))

    api_monitor = APIMonitor()
    security_manager = SecurityManager(
        rate_limit_requests=app.config['RATE_LIMIT_PER_MINUTE'],
        rate_limit_window=timedelta(minutes=1)
    )
    summary_cache = SummaryCache(
        max_size=app.config['SUMMARY_CACHE_SIZE'],
        default_ttl=app.config['SUMMARY_CACHE_TTL']
    )
    app.extensions['api_monitor'] = api_monitor
    app.extensions['security_manager'] = security_manager
    app.extensions['summary_cache'] = summary_cache

    @app.before_request
    def before_request():
        request.start_time = time.time()

        # Check rate limiting
        client_ip = request.headers.get('X-Forwarded-For', request.remote_addr or 'unknown').split(',')[0].strip()
        if not security_manager.check_rate_limit(client_ip):
            return jsonify({'error': 'Rate limit exceeded'}), 429

    @app.after_request
    def after_request(response):
        for header, value in security_manager.get_security_headers().items():
            response.headers.setdefault(header, value)

        if hasattr(request, 'start_time'):
            api_monitor.log_request(
                request.method,
                request.endpoint or request.path,
                response.status_code,
                time.time() - request.start_time
            )
        return response

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Unhandled error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    # Register blueprints
    app.register_blueprint(prices_bp, url_prefix='/api')
    app.register_blueprint(summary_bp, url_prefix='/api')
    app.register_blueprint(checklist_bp, url_prefix='/api')
    app.register_blueprint(export_bp, url_prefix='/api')

    @app.route('/api')
    def api_index():
        return jsonify({'message': 'Retail POS API Server', 'status': 'running', 'timestamp': datetime.now().isoformat()})

    @app.route('/api/health')
    def health_check():
        """Health check endpoint"""
        try:
            db.session.execute(text('SELECT 1'))
            database_ok = True
        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            database_ok = False

        stats = api_monitor.get_api_stats()
        health_status = {
            'status': 'healthy' if database_ok else 'unhealthy',
            'timestamp': datetime.now().isoformat(),
            'database_accessible': database_ok,
            'uptime_seconds': stats['uptime_seconds'],
            'total_requests': stats['total_requests'],
            'error_rate': stats['error_rate'],
        }
        return jsonify(health_status), 200 if database_ok else 503

    @app.route('/api/metrics')
    def metrics():
        """Metrics endpoint for monitoring"""
        return jsonify({
            'timestamp': datetime.now().isoformat(),
            'api': api_monitor.get_api_stats(),
            'summary_cache': summary_cache.get_stats()
        })

    return app
