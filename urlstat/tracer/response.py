"""
Trace Report

The report is shared by every hop of a redirect chain.
"""

from dataclasses import dataclass, field


@dataclass
class Response:
    """
    Trace Report Data Class

    Append-only list of report lines plus the redirect counter of the chain.
    Created once by the caller and read only after the chain has finished.
    """

    # Report lines, in report order
    log: list[str] = field(default_factory=list)
    # Number of redirects followed so far
    redirects_followed: int = 0

    def report(self, fmt: str, *args: object) -> None:
        """Append one line, %-formatting it when arguments are given."""
        self.log.append(fmt % args if args else fmt)

    def __str__(self) -> str:
        return "\n".join(self.log)
