import random
from typing import Callable, List, Optional

from .enums import SessionState, TERMINAL_STATES
from .types import QuizItem, ReviewOutcome
from ..config import MAX_SESSION_ATTEMPTS

_system_random = random.SystemRandom()


def random_permutation(items):
    items = list(items)
    return _system_random.sample(items, len(items))


class ReviewSession:
    """
    One multiple-choice review pass over a pool of due terms.

    Terms live in an arena (``_items``) and the working queue holds indexes
    into it, so a term answered wrongly can be appended to the end of the
    queue again without copying it. Each term gets at most
    ``MAX_SESSION_ATTEMPTS`` wrong answers before it is recorded as failed.
    Once the queue is exhausted the accumulated outcomes are handed to
    ``on_complete`` exactly once; an empty pool or an abandoned session never
    calls it.
    """

    def __init__(
        self,
        pool,
        shuffle: Callable = random_permutation,
        on_complete: Optional[Callable[[List[ReviewOutcome]], None]] = None,
    ):
        self._shuffle = shuffle
        self._on_complete = on_complete
        self.load(pool)

    def load(self, pool):
        """(Re)start the session over ``pool``, reshuffling the order."""
        self.state = SessionState.LOADING
        self._items = [
            p if isinstance(p, QuizItem) else QuizItem.from_card(p) for p in pool
        ]
        self._queue = list(self._shuffle(range(len(self._items))))
        self._position = 0
        self._failures = {}
        self._outcomes = []
        self._options = []

        if not self._items:
            self.state = SessionState.EMPTY
            return
        self._present()

    # -- read-only views --------------------------------------------------

    @property
    def current(self) -> Optional[QuizItem]:
        if self.state in (SessionState.PRESENTING, SessionState.ANSWERED):
            return self._items[self._queue[self._position]]
        return None

    @property
    def options(self) -> List[str]:
        return list(self._options)

    @property
    def position(self) -> int:
        return self._position

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    @property
    def pool_size(self) -> int:
        return len(self._items)

    @property
    def outcomes(self) -> List[ReviewOutcome]:
        return list(self._outcomes)

    @property
    def is_over(self) -> bool:
        return self.state in TERMINAL_STATES

    def failure_count(self, term_id: str) -> int:
        return self._failures.get(term_id, 0)

    # -- transitions ------------------------------------------------------

    def submit(self, option: str) -> Optional[bool]:
        """
        Score ``option`` against the current term.

        Returns ``None`` when there is nothing to answer, which includes a
        second answer for a presentation that has already been scored.
        """
        if self.state != SessionState.PRESENTING:
            return None

        index = self._queue[self._position]
        item = self._items[index]
        correct = option == item.answer

        if correct:
            self._outcomes.append(ReviewOutcome(item.term_id, True))
        else:
            fails = self._failures.get(item.term_id, 0) + 1
            self._failures[item.term_id] = fails
            if fails < MAX_SESSION_ATTEMPTS:
                self._queue.append(index)
            else:
                self._outcomes.append(ReviewOutcome(item.term_id, False))

        self.state = SessionState.ANSWERED
        return correct

    def advance(self):
        if self.state != SessionState.ANSWERED:
            return
        self._position += 1
        self._present()

    def answer(self, option: str) -> Optional[bool]:
        """Submit and move straight on to the next presentation."""
        correct = self.submit(option)
        if correct is not None:
            self.advance()
        return correct

    def abandon(self):
        """Leave before the end; nothing accumulated so far is reported."""
        if self.is_over:
            return
        self._outcomes = []
        self._options = []
        self.state = SessionState.ABANDONED

    def _present(self):
        if self._position >= len(self._queue):
            self._finish()
            return
        item = self._items[self._queue[self._position]]
        self._options = list(self._shuffle([item.answer, *item.distractors]))
        self.state = SessionState.PRESENTING

    def _finish(self):
        self._options = []
        self.state = SessionState.FINISHED
        if self._on_complete is not None:
            self._on_complete(list(self._outcomes))

    # -- persistence ------------------------------------------------------

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "items": [item.to_dict() for item in self._items],
            "queue": list(self._queue),
            "position": self._position,
            "failures": dict(self._failures),
            "outcomes": [
                {"term_id": o.term_id, "success": o.success} for o in self._outcomes
            ],
            "options": list(self._options),
        }

    @classmethod
    def restore(cls, snapshot: dict, shuffle=random_permutation, on_complete=None):
        session = cls.__new__(cls)
        session._shuffle = shuffle
        session._on_complete = on_complete
        session.state = SessionState(snapshot["state"])
        session._items = [QuizItem.from_dict(d) for d in snapshot["items"]]
        session._queue = list(snapshot["queue"])
        session._position = snapshot["position"]
        session._failures = dict(snapshot["failures"])
        session._outcomes = [
            ReviewOutcome(o["term_id"], o["success"]) for o in snapshot["outcomes"]
        ]
        session._options = list(snapshot["options"])
        return session
