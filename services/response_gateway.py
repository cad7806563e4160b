# services/response_gateway.py
import logging

from database.response_store import EmailPattern, StoreError, DuplicateRecord
from errors import MalformedEmail, IncompleteResponse
from models.quiz_response import QuizResponse
from services.email_rules import normalize_email, local_part

logger = logging.getLogger(__name__)


class ResponseGateway:
    """
    The only path from the quiz to the responses table.

    Every call is a single round trip with no retries. There is no
    transaction around check-then-insert; the store's unique index on email
    settles the race that is left.
    """

    def __init__(self, store, allowed_domain, fail_closed=True):
        self.store = store
        self.allowed_domain = allowed_domain.lower()
        self.fail_closed = fail_closed

    def _similar_pattern(self, email):
        return EmailPattern(local_part(email), self.allowed_domain)

    def exists_similar(self, email):
        """
        True if any stored email shares this local-part prefix within the
        allowed domain. Store errors resolve to `fail_closed`.
        """
        if not email:
            logger.debug("[CHECK] Empty email, nothing to look up")
            return False

        normalized = normalize_email(email)
        try:
            pattern = self._similar_pattern(normalized)
        except MalformedEmail:
            logger.info(f"[CHECK] Invalid email format, no '@': {normalized}")
            return False

        try:
            matches = self.store.find(pattern)
        except StoreError as e:
            logger.error(f"[CHECK] Store error looking up {pattern}: {e}")
            if self.fail_closed:
                logger.warning(f"[CHECK] Treating {normalized} as already responded (fail-closed)")
            return self.fail_closed

        if matches:
            logger.warning(f"[CHECK] {len(matches)} similar email(s) found for {normalized}")
            for item in matches:
                logger.debug(f"[CHECK]   - {item['email']}")
            return True

        logger.info(f"[CHECK] No similar email found for {normalized}")
        return False

    def save(self, response):
        """
        Persist a finished quiz. Returns False when nothing was written,
        whether because of a duplicate or a failure.
        """
        response.email = normalize_email(response.email)
        try:
            response.validate()
            pattern = self._similar_pattern(response.email)
        except (IncompleteResponse, MalformedEmail) as e:
            logger.error(f"[SAVE] Refusing to save {response.email!r}: {e}")
            return False

        logger.info(f"[SAVE] Saving response for {response.email}")

        # Last check right before the write
        try:
            matches = self.store.find(pattern)
        except StoreError as e:
            logger.error(f"[SAVE] Duplicate check failed for {response.email}: {e}")
            return False

        if matches:
            logger.warning(f"[SAVE] BLOCKED - similar email already stored: {response.email}")
            for item in matches:
                logger.debug(f"[SAVE]   - {item['email']}")
            return False

        logger.debug(f"[SAVE] score={response.score} result={response.result} answers={response.answers}")
        try:
            record_id = self.store.insert(response.to_record())
        except DuplicateRecord as e:
            logger.warning(f"[SAVE] Unique constraint rejected {response.email}: {e}")
            return False
        except StoreError as e:
            logger.error(f"[SAVE] Error saving response for {response.email}: {e}")
            return False

        logger.info(f"[SAVE] Response {record_id} saved for {response.email}")
        return True

    def responses_for_email(self, email):
        """Stored responses for exactly this email, newest first; None on store error"""
        normalized = normalize_email(email)
        try:
            records = self.store.find_by_email(normalized)
        except StoreError as e:
            logger.error(f"[STORE] Error fetching responses for {normalized}: {e}")
            return None
        return [QuizResponse(record) for record in records]
