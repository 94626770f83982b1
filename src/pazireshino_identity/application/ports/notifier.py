"""Notifier - the out-of-band delivery capability the identity core needs."""

from typing import Protocol


class Notifier(Protocol):
    """Delivers a password reset reference to a principal.

    Implementations are synchronous, enforce their own timeout and raise on
    any delivery failure. They never retry.
    """

    def send_password_reset_email(self, to_email: str, reset_url: str) -> None: ...
