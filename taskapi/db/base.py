"""Centralized SQLModel imports to ensure metadata is populated."""

from taskapi.models import user as _user  # noqa: F401
from taskapi.models import task as _task  # noqa: F401
from taskapi.models import refresh_token as _refresh_token  # noqa: F401
