"""
Trace Domain Model

Defines the payload returned by the trace endpoint.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class TraceResult(BaseModel):
    """Trace Endpoint Response Model"""

    # "ok" when the trace completed, "err" when it was aborted
    status: Literal["ok", "err"] = Field(..., description="Trace status")
    # Rendered trace report
    trace: Optional[str] = Field(None, description="Rendered trace")
    # Error message of an aborted trace
    message: Optional[str] = Field(None, description="Error message")
    # Error code of an aborted trace
    code: Optional[str] = Field(None, description="Error code")
