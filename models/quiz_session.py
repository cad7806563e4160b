# models/quiz_session.py
from enum import Enum


class QuizStep(str, Enum):
    """Screens of the quiz."""
    EMAIL_ENTRY = "email_entry"
    QUESTIONING = "questioning"
    RESULT = "result"
    BLOCKED = "blocked"


class QuizSession:
    """
    Transient state of one person going through the quiz.

    Lives in the browser's signed cookie between requests (see to_dict /
    from_dict); it is never persisted server side.
    """

    def __init__(self, session_data=None):
        session_data = session_data or {}
        self.email = session_data.get('email', '')
        self.step = QuizStep(session_data.get('step', QuizStep.EMAIL_ENTRY.value))
        self.current_question_index = session_data.get('current_question_index', 0)
        self.collected_answers = list(session_data.get('collected_answers', []))
        self.has_already_responded = session_data.get('has_already_responded', False)
        self.score = session_data.get('score')
        self.result = session_data.get('result')
        # Inline message for the email screen (validation or duplicate)
        self.message = session_data.get('message')
        self.error_code = session_data.get('error_code')
        self.save_failed = session_data.get('save_failed', False)
        self.save_error = session_data.get('save_error')

    @property
    def is_blocked(self):
        return self.step == QuizStep.BLOCKED

    def clear_message(self):
        self.message = None
        self.error_code = None

    def to_dict(self):
        return {
            'email': self.email,
            'step': self.step.value,
            'current_question_index': self.current_question_index,
            'collected_answers': list(self.collected_answers),
            'has_already_responded': self.has_already_responded,
            'score': self.score,
            'result': self.result,
            'message': self.message,
            'error_code': self.error_code,
            'save_failed': self.save_failed,
            'save_error': self.save_error,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data)
