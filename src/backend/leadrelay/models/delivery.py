from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ChannelStatus(str, Enum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


class ChannelResult(BaseModel):
    """Outcome of one delivery channel for a single lead."""

    status: ChannelStatus
    reason: Optional[str] = None
    status_code: Optional[int] = None
    response: Any = None
    message_id: Optional[str] = None

    @classmethod
    def delivered(cls, message_id: Optional[str] = None) -> ChannelResult:
        return cls(status=ChannelStatus.DELIVERED, message_id=message_id)

    @classmethod
    def skipped(cls, reason: str) -> ChannelResult:
        return cls(status=ChannelStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(
        cls,
        reason: str,
        status_code: Optional[int] = None,
        response: Any = None,
    ) -> ChannelResult:
        return cls(
            status=ChannelStatus.FAILED,
            reason=reason,
            status_code=status_code,
            response=response,
        )

    @property
    def ok(self) -> bool:
        return self.status is ChannelStatus.DELIVERED

    def to_response(self) -> Dict[str, Any]:
        if self.status is ChannelStatus.DELIVERED:
            data: Dict[str, Any] = {"ok": True}
            if self.message_id:
                data["messageId"] = self.message_id
            return data
        if self.status is ChannelStatus.SKIPPED:
            return {"ok": False, "skipped": True}
        data = {"ok": False, "error": self.reason}
        if self.status_code is not None:
            data["status"] = self.status_code
        if self.response is not None:
            data["response"] = self.response
        return data


class DeliveryReport(BaseModel):
    results: Dict[str, ChannelResult]
    ok: bool
    error: Optional[str] = None

    @property
    def all_skipped(self) -> bool:
        return all(result.status is ChannelStatus.SKIPPED for result in self.results.values())

    def to_response(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"ok": self.ok}
        for name, result in self.results.items():
            data[name] = result.to_response()
        if self.error:
            data["error"] = self.error
        return data
