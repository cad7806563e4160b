# services/result_classifier.py
from collections import namedtuple

ResultProfile = namedtuple('ResultProfile', ['label', 'description', 'emoji', 'image_url'])

RED_ALE = "Red Ale Intensa"
IPA = "IPA Amarga"
CRAFT = "Cerveza artesanal suave"
LAGER = "Cerveza dorada ligera"

# (inclusive lower bound, label), highest first
SCORE_THRESHOLDS = [
    (17, RED_ALE),
    (13, IPA),
    (9, CRAFT),
]
DEFAULT_RESULT = LAGER

RESULT_PROFILES = {
    RED_ALE: ResultProfile(
        RED_ALE,
        "Directo, decidido, nada te detiene.",
        "🍺",
        "https://media.giphy.com/media/3o7btZDbB1xfuYKQne/giphy.gif",
    ),
    IPA: ResultProfile(
        IPA,
        "Valiente, resolutiva, independiente.",
        "🍻",
        "https://media.giphy.com/media/YrMrSUfeh5do2FISt8/giphy.gif",
    ),
    CRAFT: ResultProfile(
        CRAFT,
        "Actúas cuando se necesita, con mesura.",
        "🥂",
        "https://media.giphy.com/media/3o7btQsLqXMJAPu6Na/giphy.gif",
    ),
    LAGER: ResultProfile(
        LAGER,
        "Prefieres evitar conflictos, avanzas a tu ritmo.",
        "🍹",
        "https://media.giphy.com/media/l2JJyLbhqCF4va86c/giphy.gif",
    ),
}


def calculate_score(answers):
    return sum(answers)


def classify_score(score):
    """Map a quiz score to its beer personality label"""
    for lower_bound, label in SCORE_THRESHOLDS:
        if score >= lower_bound:
            return label
    return DEFAULT_RESULT


def get_profile(label):
    return RESULT_PROFILES[label]
