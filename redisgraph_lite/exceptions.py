"""Error taxonomy for redisgraph-lite."""


class GraphClientError(Exception):
    """Base class for client-side graph errors."""


class ConfigurationError(GraphClientError):
    """Client was constructed with invalid settings (e.g. no graph name)."""


class TransportError(GraphClientError):
    """The transport failed to deliver a command or its reply.

    Attributes:
        command: Name of the command that failed, when known
    """

    def __init__(self, message: str, command: str | None = None):
        super().__init__(message)
        self.command = command


class DecodeWarning(UserWarning):
    """Non-fatal decoding problem: an unknown column type or a malformed stats line.

    Emitted with warnings.warn (and logged), so decoding carries on under the
    default filters. Running with -W error or filterwarnings = error turns it
    into an exception that aborts the query; ignore the category explicitly
    (e.g. "ignore::redisgraph_lite.DecodeWarning") if errors are escalated.
    """
