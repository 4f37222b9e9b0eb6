import random
import time
from dataclasses import dataclass

import streamlit as st

GAME_ID = "memory-match"
TITLE = "Memory Match"
DESCRIPTION = "Find matching pairs"

SYMBOLS = ["▲", "■", "●", "★", "✿", "♥", "◆", "◉"]
BOARD_COLUMNS = 4
FACE_DOWN = "❔"

# Outcomes of a flip
IGNORED = "ignored"
FLIPPED = "flipped"
MATCH = "match"
MISMATCH = "mismatch"
WON = "won"


@dataclass(frozen=True)
class Card:
    index: int
    symbol: str
    uid: str


def shuffle_deck(pairs: int, rng=None) -> list:
    """Two cards per symbol, shuffled with Fisher-Yates."""
    if not 1 <= pairs <= len(SYMBOLS):
        raise ValueError(f"pairs must be between 1 and {len(SYMBOLS)}, got {pairs}")
    rng = rng or random.Random()
    chosen = SYMBOLS[:pairs]
    deck = [Card(i, s, f"{s}-{i}") for i, s in enumerate(chosen + chosen)]
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


class MemoryMatch:
    """
    Flip/match state machine. At most two unmatched cards are face up; a mismatched
    pair stays visible until the reveal window ends, and flips during that window
    are ignored. The pending reveal is never cancelled or restarted.
    """

    def __init__(self, pairs=8, reveal_delay=0.7, best=None, rng=None, clock=time.monotonic):
        self.pairs = pairs
        self.reveal_delay = reveal_delay
        self.best = best
        self._rng = rng
        self._clock = clock
        self.deck = []
        self.flipped = []
        self.matched = set()
        self.moves = 0
        self.hide_at = None

    def new_game(self):
        self.deck = shuffle_deck(self.pairs, self._rng)
        self.flipped = []
        self.matched = set()
        self.moves = 0
        self.hide_at = None

    @property
    def pending(self) -> bool:
        return self.hide_at is not None

    @property
    def is_won(self) -> bool:
        return bool(self.deck) and len(self.matched) == len(self.deck)

    def is_face_up(self, i: int) -> bool:
        return i in self.flipped or self.deck[i].uid in self.matched

    def tick(self, now=None) -> bool:
        """Flips a mismatched pair back once its reveal window has elapsed."""
        now = self._clock() if now is None else now
        if self.hide_at is not None and now >= self.hide_at:
            self.flipped = []
            self.hide_at = None
            return True
        return False

    def flip(self, i: int, now=None) -> str:
        now = self._clock() if now is None else now
        self.tick(now)
        if not 0 <= i < len(self.deck):
            raise IndexError(f"No card at position {i}")
        if i in self.flipped or self.deck[i].uid in self.matched:
            return IGNORED
        if len(self.flipped) == 2:
            return IGNORED

        self.flipped.append(i)
        if len(self.flipped) < 2:
            return FLIPPED

        # A move is the second card of a pair
        self.moves += 1
        a, b = self.flipped
        if self.deck[a].symbol != self.deck[b].symbol:
            self.hide_at = now + self.reveal_delay
            return MISMATCH

        self.matched.update((self.deck[a].uid, self.deck[b].uid))
        self.flipped = []
        if self.is_won:
            self.best = self.moves if self.best is None else min(self.best, self.moves)
            return WON
        return MATCH

    def progress(self) -> dict:
        return {"moves": self.moves, "best": self.best}


def _saved_best(saved):
    if not isinstance(saved, dict):
        return None
    best = saved.get("best")
    return best if isinstance(best, int) and best >= 0 else None


# --- Streamlit callbacks ---

def _on_card(game, i, caps):
    outcome = game.flip(i)
    if outcome in (MATCH, MISMATCH, WON):
        caps.save_state(GAME_ID, game.progress())
    if outcome == WON:
        caps.notify(f"You won! Moves: {game.moves}. Best: {game.best}", icon="🎉")


def init(surface, caps, pairs=8, reveal_delay=0.7):
    game = surface.state.get("game")
    if game is None:
        game = MemoryMatch(pairs, reveal_delay, best=_saved_best(caps.load_state(GAME_ID)))
        game.new_game()
        surface.state["game"] = game
    game.tick()

    with surface.container:
        st.header(TITLE)
        reset_col, stats_col = st.columns([1, 5])
        reset_col.button("New Game", key="mem-reset", on_click=game.new_game)
        best = "-" if game.best is None else game.best
        stats_col.caption(f"Moves: {game.moves} · Best: {best}")

        for row_start in range(0, len(game.deck), BOARD_COLUMNS):
            cols = st.columns(BOARD_COLUMNS)
            for offset, col in enumerate(cols):
                i = row_start + offset
                if i >= len(game.deck):
                    break
                card = game.deck[i]
                col.button(
                    card.symbol if game.is_face_up(i) else FACE_DOWN,
                    key=f"mem-card-{i}",
                    type="primary" if card.uid in game.matched else "secondary",
                    on_click=_on_card,
                    args=(game, i, caps),
                    use_container_width=True,
                )

    if game.pending:
        # Leave the mismatched pair visible, then redraw with it turned back
        time.sleep(max(0.0, game.hide_at - time.monotonic()))
        game.tick()
        st.rerun()
