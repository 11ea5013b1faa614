"""
Applications Shared Helpers

Registration ID generation and small conversions used by the service and
the views.
"""

import threading
import time
from collections.abc import Callable

from starlette.datastructures import FormData, UploadFile

DEFAULT_PREFIX = "GOV"


class RegistrationIdGenerator:
    """
    Produces registration IDs of the form ``<prefix><epoch milliseconds>``.

    IDs are strictly increasing within one process: when two calls land in
    the same millisecond (or the clock steps back) the later call takes the
    previous value plus one. Uniqueness across processes is only enforced by
    the unique index on ``applications.registration_id``.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], float] = time.time,
    ):
        self.prefix = prefix
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            now_ms = int(self._clock() * 1000)
            self._last = max(now_ms, self._last + 1)
            return f"{self.prefix}{self._last}"


generate_registration_id = RegistrationIdGenerator()


def is_registration_id(value: str, prefix: str = DEFAULT_PREFIX) -> bool:
    """True when ``value`` is a prefix followed by digits only."""
    suffix = value[len(prefix):]
    return value.startswith(prefix) and suffix.isascii() and suffix.isdigit()


def split_form(form: FormData) -> tuple[dict[str, str], dict[str, UploadFile]]:
    """Separate a parsed multipart form into text fields and file parts."""
    data: dict[str, str] = {}
    files: dict[str, UploadFile] = {}
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            files.setdefault(key, value)
        else:
            data.setdefault(key, value)
    return data, files
