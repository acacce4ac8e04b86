"""Exceptions raised to the immediate caller of the advisor."""


class InputError(ValueError):
    """Malformed or degenerate input, rejected before the policy runs."""


class SessionStateError(RuntimeError):
    """A session was driven out of street order or after it closed."""
