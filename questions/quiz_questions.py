QUESTIONS = [
    {
        "number": 1,
        "question": "Prefiero tomar decisiones rápidamente, sin mucha consulta."
    },
    {
        "number": 2,
        "question": "Disfruto asumir el control en situaciones desafiantes."
    },
    {
        "number": 3,
        "question": "No me molesta confrontar a otros si es necesario."
    },
    {
        "number": 4,
        "question": "Me siento cómodo liderando bajo presión."
    },
    {
        "number": 5,
        "question": "Busco constantemente mejorar y competir conmigo mismo."
    }
]

# Likert scale shared by every question
ANSWER_OPTIONS = {
    1: "Definitivamente no!",
    2: "Quizás un poco",
    3: "Sí, me representa",
    4: "Totalmente yo!"
}

QUESTION_COUNT = len(QUESTIONS)
ANSWER_VALUES = tuple(sorted(ANSWER_OPTIONS))
