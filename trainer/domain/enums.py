from enum import Enum


class TermStatus(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    LEARNED = "learned"


class SessionState(str, Enum):
    LOADING = "loading"
    PRESENTING = "presenting"
    ANSWERED = "answered"
    FINISHED = "finished"
    EMPTY = "empty"
    ABANDONED = "abandoned"


STATUS_LABELS = {
    TermStatus.NEW: "New",
    TermStatus.LEARNING: "Learning",
    TermStatus.LEARNED: "Learned",
}

TERMINAL_STATES = frozenset(
    {SessionState.FINISHED, SessionState.EMPTY, SessionState.ABANDONED}
)
