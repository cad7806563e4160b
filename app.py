from flask import Flask, jsonify
import logging
import os
from config import get_config
from database.mongodb import MongoDB, MongoResponseStore
from questions.quiz_questions import QUESTION_COUNT
from routes.quiz import quiz_bp
from services.quiz_controller import QuizController
from services.response_gateway import ResponseGateway

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s %(levelname)s - %(name)s - %(message)s'
    )


def create_app(config_class=None, store=None):
    """
    Build the quiz app. The record store is created once here (or injected,
    e.g. a fake in tests) and shared by every request.
    """
    config_class = config_class or get_config()

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.secret_key = app.config['SECRET_KEY']
    configure_logging(app.config['LOG_LEVEL'])

    if store is None:
        store = MongoResponseStore(MongoDB.from_config(config_class))

    gateway = ResponseGateway(
        store,
        allowed_domain=app.config['ALLOWED_EMAIL_DOMAIN'],
        fail_closed=app.config['FAIL_CLOSED_ON_STORE_ERROR']
    )
    app.extensions['response_gateway'] = gateway
    app.extensions['quiz_controller'] = QuizController(gateway, app.config['ALLOWED_EMAIL_DOMAIN'])

    # Register blueprints
    app.register_blueprint(quiz_bp, url_prefix='/api/quiz')

    @app.route('/')
    def index():
        return jsonify({
            "service": "beer-personality-quiz",
            "questions": QUESTION_COUNT,
            "allowed_domain": app.config['ALLOWED_EMAIL_DOMAIN']
        })

    return app


if __name__ == '__main__':
    config_class = get_config()
    configure_logging(config_class.LOG_LEVEL)

    # Initialize database
    try:
        mongo = MongoDB.from_config(config_class)
        mongo.init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    app = create_app(config_class, store=MongoResponseStore(mongo))
    port = int(os.environ.get('PORT', 5000))
    app.run(debug=app.config['DEBUG'], host='0.0.0.0', port=port)
