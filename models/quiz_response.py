# models/quiz_response.py
import json

from errors import IncompleteResponse
from questions.quiz_questions import QUESTION_COUNT, ANSWER_VALUES


class QuizResponse:
    """One finished quiz, as stored in the responses table."""

    def __init__(self, response_data):
        self.email = response_data.get('email', '')
        answers = response_data.get('answers', [])
        # Stored records keep the answers JSON-encoded
        if isinstance(answers, str):
            answers = json.loads(answers)
        self.answers = list(answers)
        self.score = response_data.get('score', sum(self.answers))
        self.result = response_data.get('result', '')
        self.created_at = response_data.get('created_at')

    def validate(self):
        """Raise IncompleteResponse unless the record can be persisted as is"""
        if not self.email:
            raise IncompleteResponse("email must not be empty")
        if len(self.answers) != QUESTION_COUNT:
            raise IncompleteResponse(
                f"expected {QUESTION_COUNT} answers, got {len(self.answers)}")
        if any(a not in ANSWER_VALUES for a in self.answers):
            raise IncompleteResponse(f"answers out of range: {self.answers}")
        if self.score != sum(self.answers):
            raise IncompleteResponse(
                f"score {self.score} does not match answers total {sum(self.answers)}")
        if not self.result:
            raise IncompleteResponse("result must not be empty")

    def to_record(self):
        """Fields written on insert; created_at is left to the store"""
        return {
            'email': self.email,
            'answers': json.dumps(self.answers),
            'score': self.score,
            'result': self.result,
        }

    def to_dict(self):
        return {
            'email': self.email,
            'answers': self.answers,
            'score': self.score,
            'result': self.result,
            'created_at': self.created_at.isoformat() if hasattr(self.created_at, 'isoformat') else self.created_at,
        }
