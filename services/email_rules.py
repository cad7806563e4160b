# services/email_rules.py
import re

from errors import InvalidEmailFormat, WrongEmailDomain, MalformedEmail

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def normalize_email(email):
    """Lowercase and strip surrounding whitespace; anything but a string is empty"""
    if not isinstance(email, str):
        return ''
    return email.strip().lower()


def is_valid_email(email):
    """Validate email format"""
    return isinstance(email, str) and EMAIL_PATTERN.match(email) is not None


def has_allowed_domain(email, domain):
    return normalize_email(email).endswith('@' + domain.lower())


def validate_email(email, domain):
    """
    Return the normalized email if it is well formed and inside `domain`.

    Raises InvalidEmailFormat or WrongEmailDomain otherwise.
    """
    normalized = normalize_email(email)
    if not is_valid_email(normalized):
        raise InvalidEmailFormat(email)
    if not has_allowed_domain(normalized, domain):
        raise WrongEmailDomain(email, domain)
    return normalized


def local_part(email):
    """Substring before the first '@' of the normalized email"""
    normalized = normalize_email(email)
    at_index = normalized.find('@')
    if at_index == -1:
        raise MalformedEmail(f"no '@' in {normalized!r}")
    return normalized[:at_index]
