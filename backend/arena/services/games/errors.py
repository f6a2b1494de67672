class ArenaError(Exception):
    pass


class StorageUnavailable(ArenaError):
    """The durable store could not be reached or rejected the operation.

    Retryable: nothing in the in-memory game state has been applied.
    """


class NoGamesError(ArenaError):
    pass


class ReaderAlreadyRunning(ArenaError):
    pass


class ReaderNotRunning(ArenaError):
    pass


class ReaderStartError(ArenaError):
    pass
