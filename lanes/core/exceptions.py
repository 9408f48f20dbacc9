"""
FILE: lanes/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - LanesError (base exception)
  - BoardNotFoundError
  - ColumnNotFoundError
  - TaskNotFoundError
  - InvalidInputError
  - StorageError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from LanesError for easy catching
  - Store mutations treat unknown ids as no-ops; the *NotFound errors are
    raised only by the lookup helpers the CLI uses to resolve user input
  - StorageError never escapes the store; it becomes the store's error flag
"""


class LanesError(Exception):
    """Base exception for all lanes errors."""
    pass


class BoardNotFoundError(LanesError):
    """No board matches the given id or name."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Board '{ref}' not found")


class ColumnNotFoundError(LanesError):
    """No column in the board matches the given id or title."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Column '{ref}' not found")


class TaskNotFoundError(LanesError):
    """No task in the board matches the given id."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Task '{ref}' not found")


class InvalidInputError(LanesError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class StorageError(LanesError):
    """The key-value storage could not be read or written."""

    def __init__(self, message: str):
        super().__init__(message)
