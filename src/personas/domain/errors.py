class PersonasError(Exception):
    """base class for exceptions in personas."""
    pass

class InvalidNameError(PersonasError):
    """raised when a profile name violates the naming rules."""
    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"Invalid profile name '{name}'. {reason}")

class AlreadyExistsError(PersonasError):
    """raised when creating a profile that already exists."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Profile '{name}' already exists.")

class NotFoundError(PersonasError):
    """raised when operating on a profile that does not exist."""
    def __init__(self, name: str, hint: str = ""):
        self.name = name
        message = f"Profile '{name}' does not exist."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)

class ActiveProfileProtectedError(PersonasError):
    """raised when deleting the active profile."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Cannot delete the active profile '{name}'. Switch to another profile first."
        )

class UnmanagedConfigError(PersonasError):
    """raised when the config directory is a real directory, not a managed symlink."""
    def __init__(self, config_dir):
        self.config_dir = config_dir
        super().__init__(
            f"{config_dir} exists but is not a symlink. "
            "Back it up manually or remove it before switching profiles."
        )

class StoreUnavailableError(PersonasError):
    """raised when a credential operation needs a store that is not available."""
    pass

class IOFailureError(PersonasError):
    """raised for filesystem or external-process failures not classified above."""
    pass
