"""
Tests for the quiz flow state machine.
"""

import json

import pytest

from errors import InvalidAnswer, InvalidTransition, DuplicateEmail, DUPLICATE_MESSAGE
from models.quiz_session import QuizSession, QuizStep
from services.quiz_controller import QuizController
from services.response_gateway import ResponseGateway

from conftest import InMemoryResponseStore, DOMAIN


def started(controller, email="ana@allowed.com"):
    session = controller.submit_email(controller.new_session(), email)
    assert session.step == QuizStep.QUESTIONING
    return session


def answer_all(controller, session, answers):
    for value in answers:
        session = controller.answer(session, value)
    return session


class TestEmailEntry:
    """Tests for submit_email."""

    def test_invalid_format_stays(self, controller):
        session = controller.submit_email(controller.new_session(), "not-an-email")

        assert session.step == QuizStep.EMAIL_ENTRY
        assert session.error_code == "invalid_format"
        assert session.message == "Ingresa un correo electrónico válido"

    def test_wrong_domain_stays(self, controller, store):
        session = controller.submit_email(controller.new_session(), "ana@gmail.com")

        assert session.step == QuizStep.EMAIL_ENTRY
        assert session.error_code == "wrong_domain"
        assert store.find_calls == 0

    def test_valid_email_starts_questions(self, controller):
        session = started(controller, " Ana@Allowed.com ")

        assert session.email == "ana@allowed.com"
        assert session.current_question_index == 0
        assert session.message is None

    def test_retry_after_error_clears_message(self, controller):
        session = controller.submit_email(controller.new_session(), "bad")
        session = controller.submit_email(session, "ana@allowed.com")

        assert session.step == QuizStep.QUESTIONING
        assert session.error_code is None

    def test_store_error_blocks(self, controller, store):
        """Fail-closed: an unreachable store looks like a duplicate."""
        store.fail_find = True

        session = controller.submit_email(controller.new_session(), "ana@allowed.com")

        assert session.step == QuizStep.BLOCKED


class TestQuestioning:
    """Tests for answer()."""

    def test_advances_through_questions(self, controller):
        session = started(controller)
        session = answer_all(controller, session, [1, 2, 3])

        assert session.step == QuizStep.QUESTIONING
        assert session.current_question_index == 3
        assert session.collected_answers == [1, 2, 3]

    @pytest.mark.parametrize("value", [0, 5, -1, "x", None, True, 2.5, "²", "05", "1" * 5000, " 7 "])
    def test_rejects_out_of_scale(self, controller, value):
        session = started(controller)

        with pytest.raises(InvalidAnswer):
            controller.answer(session, value)
        assert session.collected_answers == []

    def test_accepts_numeric_string(self, controller):
        session = controller.answer(started(controller), "3")

        assert session.collected_answers == [3]

    def test_answer_before_start_is_invalid(self, controller):
        with pytest.raises(InvalidTransition):
            controller.answer(controller.new_session(), 3)

    def test_duplicate_appearing_mid_quiz_blocks(self, controller, store):
        """Another session finishing first blocks this one at the next answer."""
        session = started(controller)
        session = controller.answer(session, 2)
        store.insert({"email": "ana@allowed.com", "answers": "[]", "score": 0, "result": "x"})

        session = controller.answer(session, 2)

        assert session.step == QuizStep.BLOCKED
        assert session.message == DUPLICATE_MESSAGE
        assert session.collected_answers == [2]

    def test_email_outside_domain_returns_to_start(self, controller):
        session = started(controller)
        session.email = "ana@elsewhere.com"

        session = controller.answer(session, 4)

        assert session.step == QuizStep.EMAIL_ENTRY
        assert session.error_code == "wrong_domain"
        assert session.collected_answers == []


class TestBlocked:
    """Blocked is absorbing until reset."""

    def test_no_way_out_but_reset(self, controller, store):
        store.insert({"email": "bob@allowed.com", "answers": "[]", "score": 0, "result": "x"})
        session = controller.submit_email(controller.new_session(), "bob@allowed.com")
        assert session.is_blocked

        with pytest.raises(InvalidTransition):
            controller.submit_email(session, "carla@allowed.com")
        with pytest.raises(InvalidTransition):
            controller.answer(session, 4)
        assert session.step == QuizStep.BLOCKED

        session = controller.reset(session)
        assert session.step == QuizStep.EMAIL_ENTRY
        assert session.email == ""
        assert session.message is None

    def test_reset_only_from_blocked(self, controller):
        with pytest.raises(InvalidTransition):
            controller.reset(controller.new_session())


class TestEndToEnd:
    """Full runs against the in-memory store."""

    def test_new_email_top_score(self, controller, store):
        session = started(controller, "ana@allowed.com")
        session = answer_all(controller, session, [4, 4, 4, 4, 4])

        assert session.step == QuizStep.RESULT
        assert session.score == 20
        assert session.result == "Red Ale Intensa"
        assert session.save_failed is False
        assert session.has_already_responded is True
        assert len(store.records) == 1
        assert json.loads(store.records[0]["answers"]) == [4, 4, 4, 4, 4]

    def test_existing_email_is_blocked_at_entry(self, controller, store):
        store.insert({"email": "bob@allowed.com", "answers": "[2, 2, 2, 2, 2]", "score": 10,
                      "result": "Cerveza artesanal suave"})

        session = controller.submit_email(controller.new_session(), "bob@allowed.com")

        assert session.step == QuizStep.BLOCKED
        assert session.has_already_responded is True
        assert len(store.records) == 1

    def test_save_failure_still_shows_result(self, controller, store):
        session = started(controller, "carla@allowed.com")
        session = answer_all(controller, session, [1, 1, 1, 1])
        store.fail_insert = True

        session = controller.answer(session, 1)

        assert session.step == QuizStep.RESULT
        assert session.score == 5
        assert session.result == "Cerveza dorada ligera"
        assert session.save_failed is True
        assert session.save_error
        assert store.records == []

    def test_duplicate_right_before_save_blocks(self, controller, store):
        """A similar email stored after the last answer gate blocks the save."""
        original_find = store.find

        def find_after_other_session(pattern):
            # submit + five answer gates have run; the next lookup is the final one
            if store.find_calls == 6:
                store.insert({"email": "ana.x@allowed.com", "answers": "[]", "score": 0, "result": "x"})
            return original_find(pattern)

        store.find = find_after_other_session
        session = answer_all(controller, started(controller), [3, 3, 3, 3, 3])

        assert session.step == QuizStep.BLOCKED
        assert session.error_code == DuplicateEmail.code
        assert session.message == DUPLICATE_MESSAGE
        assert session.score is None
        assert [r["email"] for r in store.records] == ["ana.x@allowed.com"]

    def test_store_error_right_before_save_blocks(self, controller, store):
        """Fail-closed also applies to the final check."""
        original_find = store.find

        def find_then_lose_connection(pattern):
            if store.find_calls == 6:
                store.fail_find = True
            return original_find(pattern)

        store.find = find_then_lose_connection
        session = answer_all(controller, started(controller), [2, 2, 2, 2, 2])

        assert session.step == QuizStep.BLOCKED
        assert session.save_failed is False
        assert store.records == []

    def test_fail_open_lets_user_through(self, store):
        store.fail_find = True
        controller = QuizController(ResponseGateway(store, DOMAIN, fail_closed=False), DOMAIN)

        session = controller.submit_email(controller.new_session(), "ana@allowed.com")

        assert session.step == QuizStep.QUESTIONING


class TestSessionRoundTrip:
    def test_survives_serialization(self, controller):
        session = answer_all(controller, started(controller), [3, 2])

        restored = QuizSession.from_dict(session.to_dict())

        assert restored.step == QuizStep.QUESTIONING
        assert restored.collected_answers == [3, 2]
        assert restored.current_question_index == 2

    def test_describe_result(self, controller):
        session = answer_all(controller, started(controller), [3, 3, 3, 3, 3])

        view = controller.describe(session)

        assert view["step"] == "result"
        assert view["result"]["label"] == "IPA Amarga"
        assert view["current_question"] is None
