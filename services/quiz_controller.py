# services/quiz_controller.py
import logging

from errors import (
    QuizError, InvalidAnswer, InvalidTransition, DuplicateEmail,
    SAVE_FAILED_MESSAGE, WRONG_DOMAIN_MESSAGE,
    BLOCKED_TITLE, BLOCKED_BODY,
)
from models.quiz_response import QuizResponse
from models.quiz_session import QuizSession, QuizStep
from questions.quiz_questions import QUESTIONS, ANSWER_OPTIONS, ANSWER_VALUES
from services.email_rules import normalize_email, validate_email, has_allowed_domain
from services.result_classifier import calculate_score, classify_score, get_profile

logger = logging.getLogger(__name__)


class QuizController:
    """
    Walks one QuizSession through email entry, the questions and the result.

    The duplicate check runs when the email is submitted, before every
    answer is accepted, right before the final save, and once more inside
    the gateway before the write. A duplicate at any controller gate moves
    the session to BLOCKED, which only reset() leaves.
    """

    def __init__(self, gateway, allowed_domain, questions=None):
        self.gateway = gateway
        self.allowed_domain = allowed_domain.lower()
        self.questions = questions or QUESTIONS

    @property
    def last_index(self):
        return len(self.questions) - 1

    # -------------------------
    # Transitions
    # -------------------------
    def new_session(self):
        return QuizSession()

    def submit_email(self, session, email):
        """EMAIL_ENTRY -> QUESTIONING, or BLOCKED if a similar email already answered"""
        self._require_step(session, QuizStep.EMAIL_ENTRY, "submit an email")
        session.clear_message()
        session.email = email if isinstance(email, str) else ''
        logger.info(f"[START] Email submitted: {session.email!r}")

        try:
            normalized = validate_email(email, self.allowed_domain)
        except QuizError as e:
            logger.info(f"[START] Email rejected ({e.code}): {session.email!r}")
            session.message = e.message
            session.error_code = e.code
            return session

        session.email = normalized
        if self.gateway.exists_similar(normalized):
            logger.warning(f"[START] BLOCKING - email already responded: {normalized}")
            self._block(session)
            return session

        logger.info(f"[START] Check OK, starting questions for {normalized}")
        session.has_already_responded = False
        session.step = QuizStep.QUESTIONING
        session.current_question_index = 0
        session.collected_answers = []
        return session

    def answer(self, session, value):
        """Record the answer to the current question; the last one produces the result"""
        self._require_step(session, QuizStep.QUESTIONING, "answer a question")
        value = self._check_answer(value)
        index = session.current_question_index
        logger.info(f"[ANSWER] Question {index + 1}, value {value}")

        email = normalize_email(session.email)
        if not has_allowed_domain(email, self.allowed_domain):
            logger.warning(f"[ANSWER] Email outside @{self.allowed_domain}, back to start: {email}")
            session.step = QuizStep.EMAIL_ENTRY
            session.current_question_index = 0
            session.collected_answers = []
            session.message = WRONG_DOMAIN_MESSAGE.format(domain=self.allowed_domain)
            session.error_code = "wrong_domain"
            return session

        if self.gateway.exists_similar(email):
            logger.warning(f"[ANSWER] BLOCKING - email already responded: {email}")
            self._block(session)
            return session

        session.collected_answers.append(value)
        if index < self.last_index:
            session.current_question_index = index + 1
            return session

        self._finish(session)
        return session

    def reset(self, session):
        """BLOCKED -> EMAIL_ENTRY with an empty email field"""
        self._require_step(session, QuizStep.BLOCKED, "return to start")
        logger.info(f"[RESET] Returning {session.email!r} to email entry")
        return QuizSession()

    # -------------------------
    # Internals
    # -------------------------
    def _finish(self, session):
        if self.gateway.exists_similar(session.email):
            logger.warning(f"[SAVE] BLOCKING - email responded before the final save: {session.email}")
            self._block(session)
            return

        score = calculate_score(session.collected_answers)
        result = classify_score(score)
        session.score = score
        session.result = result
        session.step = QuizStep.RESULT
        logger.info(f"[ANSWER] Quiz completed by {session.email}: score={score} result={result}")

        # The result stays on screen whatever happens to the write
        response = QuizResponse({
            'email': session.email,
            'answers': session.collected_answers,
            'score': score,
            'result': result,
        })
        if self.gateway.save(response):
            session.has_already_responded = True
            session.save_failed = False
            session.save_error = None
        else:
            logger.error(f"[SAVE] Response for {session.email} was not saved")
            session.save_failed = True
            session.save_error = SAVE_FAILED_MESSAGE

    def _block(self, session):
        session.step = QuizStep.BLOCKED
        session.has_already_responded = True
        duplicate = DuplicateEmail(session.email)
        session.message = duplicate.message
        session.error_code = duplicate.code

    def _require_step(self, session, step, action):
        if session.step != step:
            raise InvalidTransition(f"Cannot {action} while in step '{session.step.value}'")

    @staticmethod
    def _check_answer(value):
        if isinstance(value, str):
            text = value.strip()
            value = int(text) if text in [str(v) for v in ANSWER_VALUES] else None
        # bool is an int subclass; True would pass as 1
        if isinstance(value, bool) or not isinstance(value, int) or value not in ANSWER_VALUES:
            raise InvalidAnswer(f"Answer must be one of {list(ANSWER_VALUES)}")
        return value

    # -------------------------
    # Utilities for transport
    # -------------------------
    def describe(self, session):
        """JSON-ready view of the session for the client"""
        view = session.to_dict()
        view['total_questions'] = len(self.questions)
        view['answered'] = len(session.collected_answers)
        view['blocked'] = None
        view['current_question'] = None

        if session.step == QuizStep.QUESTIONING:
            question = self.questions[session.current_question_index]
            view['current_question'] = {
                'index': session.current_question_index,
                'number': question['number'],
                'question': question['question'],
                'options': {str(k): text for k, text in ANSWER_OPTIONS.items()},
            }
        elif session.step == QuizStep.RESULT:
            view['result'] = get_profile(session.result)._asdict()
        elif session.step == QuizStep.BLOCKED:
            view['blocked'] = {'title': BLOCKED_TITLE, 'body': BLOCKED_BODY}
        return view
