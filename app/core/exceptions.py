"""
Error types shared by the external service clients.
"""


class ServiceUnavailableError(Exception):
    """
    Raised when an upstream service call fails.

    Covers transport errors, quota and non-OK statuses, malformed
    response envelopes and missing credentials. Text that merely fails
    to match the expected shape is never reported this way.
    """

    def __init__(self, service: str, message: str):
        self.service = service
        self.message = message
        self.error_code = "SERVICE_UNAVAILABLE"
        super().__init__(f"{service}: {message}")
