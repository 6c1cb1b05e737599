class TrainerError(Exception):
    """Base class for errors surfaced to API callers."""


class DefaultGroupProtected(TrainerError):
    def __init__(self, group_id):
        super().__init__(f"Group {group_id!r} is the default group and cannot be deleted")
        self.group_id = group_id
