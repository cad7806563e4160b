"""
Quiz error taxonomy and the messages shown to the person taking the quiz.

Validation errors (format, domain) and duplicate detection never escape the
controller: they end up as a message on the session. Only misuse of the
flow (bad answer value, operation in the wrong step) reaches the routes.
"""

INVALID_FORMAT_MESSAGE = "Ingresa un correo electrónico válido"
WRONG_DOMAIN_MESSAGE = "Por favor, utiliza un correo con dominio @{domain}"
DUPLICATE_MESSAGE = "Un email similar ya ha respondido el quiz anteriormente."
SAVE_FAILED_MESSAGE = "Error al guardar las respuestas. Por favor, intenta nuevamente."

BLOCKED_TITLE = "Acceso Bloqueado"
BLOCKED_BODY = "Este correo ya ha completado el quiz anteriormente"


class QuizError(Exception):
    """Base class for quiz flow errors."""
    code = "quiz_error"

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class InvalidEmailFormat(QuizError):
    """Malformed email address."""
    code = "invalid_format"

    def __init__(self, email=None):
        super().__init__(INVALID_FORMAT_MESSAGE)
        self.email = email


class WrongEmailDomain(QuizError):
    """Email address outside the allowed domain."""
    code = "wrong_domain"

    def __init__(self, email=None, domain=""):
        super().__init__(WRONG_DOMAIN_MESSAGE.format(domain=domain))
        self.email = email
        self.domain = domain


class MalformedEmail(QuizError):
    """Email address without a local-part separator."""
    code = "malformed_email"


class DuplicateEmail(QuizError):
    """A similar email already answered the quiz."""
    code = "duplicate_email"

    def __init__(self, email=None):
        super().__init__(DUPLICATE_MESSAGE)
        self.email = email


class InvalidAnswer(QuizError):
    """Answer value outside the 1-4 scale."""
    code = "invalid_answer"


class InvalidTransition(QuizError):
    """Operation not allowed in the current quiz step."""
    code = "invalid_transition"


class IncompleteResponse(QuizError):
    """Quiz response is not ready to be stored."""
    code = "incomplete_response"
