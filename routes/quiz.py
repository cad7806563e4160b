# routes/quiz.py
import logging

from flask import Blueprint, request, jsonify, session, current_app

from errors import InvalidAnswer, InvalidTransition
from models.quiz_session import QuizSession, QuizStep
from questions.quiz_questions import QUESTIONS, ANSWER_OPTIONS

logger = logging.getLogger(__name__)

quiz_bp = Blueprint('quiz_bp', __name__)

SESSION_KEY = 'quiz'


def _controller():
    return current_app.extensions['quiz_controller']


def _load_session():
    return QuizSession.from_dict(session.get(SESSION_KEY))


def _store_session(quiz_session):
    session[SESSION_KEY] = quiz_session.to_dict()
    session.modified = True


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _state_response(quiz_session, status=200, **extra):
    payload = {"success": status < 400, "state": _controller().describe(quiz_session)}
    payload.update(extra)
    return jsonify(payload), status


@quiz_bp.route('/questions', methods=['GET'])
def get_questions():
    return jsonify({
        "success": True,
        "questions": QUESTIONS,
        "options": {str(k): text for k, text in ANSWER_OPTIONS.items()}
    })


@quiz_bp.route('/state', methods=['GET'])
def get_state():
    quiz_session = _load_session()
    _store_session(quiz_session)
    return _state_response(quiz_session)


@quiz_bp.route('/start', methods=['POST'])
def start_quiz():
    """
    Expected payload:
    {
      email: str
    }
    Validation and duplicate outcomes are reported in the returned state.
    """
    data = _json_body()
    quiz_session = _load_session()
    try:
        quiz_session = _controller().submit_email(quiz_session, data.get('email', ''))
    except InvalidTransition as e:
        return _state_response(quiz_session, 409, error=e.message)
    _store_session(quiz_session)
    return _state_response(quiz_session)


@quiz_bp.route('/answer', methods=['POST'])
def submit_answer():
    """
    Expected payload:
    {
      value: 1 | 2 | 3 | 4
    }
    """
    data = _json_body()
    if data.get('value') is None:
        return jsonify({"success": False, "error": "Missing value"}), 400

    quiz_session = _load_session()
    try:
        quiz_session = _controller().answer(quiz_session, data['value'])
    except InvalidAnswer as e:
        return _state_response(quiz_session, 400, error=e.message)
    except InvalidTransition as e:
        return _state_response(quiz_session, 409, error=e.message)
    _store_session(quiz_session)
    return _state_response(quiz_session)


@quiz_bp.route('/reset', methods=['POST'])
def reset_quiz():
    quiz_session = _load_session()
    try:
        quiz_session = _controller().reset(quiz_session)
    except InvalidTransition as e:
        return _state_response(quiz_session, 409, error=e.message)
    _store_session(quiz_session)
    return _state_response(quiz_session)


@quiz_bp.route('/session', methods=['DELETE'])
def discard_session():
    session.pop(SESSION_KEY, None)
    session.modified = True
    return jsonify({"success": True, "message": "Session discarded"})


@quiz_bp.route('/responses', methods=['GET'])
def get_responses():
    """Stored responses for the email this session got past the email screen with"""
    quiz_session = _load_session()
    if quiz_session.step == QuizStep.EMAIL_ENTRY or not quiz_session.email:
        return jsonify({"success": False, "error": "Submit your email first"}), 403

    responses = current_app.extensions['response_gateway'].responses_for_email(quiz_session.email)
    if responses is None:
        return jsonify({"success": False, "error": "Responses are unavailable right now"}), 503

    return jsonify({
        "success": True,
        "responses": [r.to_dict() for r in responses]
    })
