from dataclasses import asdict, dataclass

import streamlit as st

GAME_ID = "logic-quiz"
TITLE = "Logic Quiz"
DESCRIPTION = "Multiple-choice logic questions"


@dataclass(frozen=True)
class Question:
    prompt: str
    answer: str
    options: tuple


QUESTIONS = (
    Question(
        "If all bloops are razzies and all razzies are zaps, are all bloops zaps?",
        "Yes",
        ("Yes", "No"),
    ),
    Question(
        "Which number continues the sequence: 2, 3, 5, 7, 11, ... ?",
        "13",
        ("13", "14", "15"),
    ),
    Question(
        "A train leaves at noon at 60km/h. In 2 hours it travels 120km. True or false?",
        "True",
        ("True", "False"),
    ),
)


@dataclass
class QuizState:
    score: int = 0
    index: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data) -> "QuizState":
        """Builds a state from saved data, falling back to a fresh state if it is unusable."""
        if not isinstance(data, dict):
            return cls()
        try:
            score, index = int(data.get("score", 0)), int(data.get("index", 0))
        except (TypeError, ValueError):
            return cls()
        if score < 0 or index < 0:
            return cls()
        return cls(score=score, index=index)


def current_question(state: QuizState, questions=QUESTIONS) -> Question:
    # Index wraps so play can go on forever
    return questions[state.index % len(questions)]


def reset(state: QuizState) -> QuizState:
    state.score = 0
    state.index = 0
    return state


def answer(state: QuizState, choice: str, questions=QUESTIONS) -> bool:
    """Records an answer. The index always advances; the score only on a correct choice."""
    correct = choice == current_question(state, questions).answer
    if correct:
        state.score += 1
    state.index += 1
    return correct


# --- Streamlit callbacks ---

def _choose(caps, index, choice):
    state = QuizState.from_dict(caps.load_state(GAME_ID))
    if state.index != index:
        # The button belongs to a question that has already been answered
        return
    answer(state, choice)
    caps.save_state(GAME_ID, state.to_dict())


def _start(ui):
    ui["started"] = True


def _reset(caps, ui):
    state = reset(QuizState.from_dict(caps.load_state(GAME_ID)))
    caps.save_state(GAME_ID, state.to_dict())
    ui["started"] = False


def init(surface, caps):
    ui = surface.state
    state = QuizState.from_dict(caps.load_state(GAME_ID))

    with surface.container:
        st.header(TITLE)
        start_col, reset_col, score_col = st.columns([1, 1, 4])
        start_col.button("Start", key="quiz-start", on_click=_start, args=(ui,))
        reset_col.button("Reset score", key="quiz-reset", on_click=_reset, args=(caps, ui))
        score_col.caption(f"Score: {state.score}")

        if not ui.get("started"):
            st.caption("Press Start to begin.")
            return

        question = current_question(state)
        st.markdown(f"**Q:** {question.prompt}")
        option_cols = st.columns(len(question.options))
        for i, (col, option) in enumerate(zip(option_cols, question.options)):
            col.button(
                option,
                key=f"quiz-opt-{state.index}-{i}",
                on_click=_choose,
                args=(caps, state.index, option),
            )
