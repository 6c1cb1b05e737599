from .data.models import Group, ReviewSessionRecord, Term  # noqa: F401
