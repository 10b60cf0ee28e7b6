"""Admin notifications for generated reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger("scoopify.services.notifications")

REPORT_EMAIL_SUBJECT = "Weekly Business Intelligence Report"
REPORT_EMAIL_TEMPLATE = "business-intelligence-report"


@dataclass(slots=True)
class EmailMessage:
    to: str
    subject: str
    template: str
    data: dict[str, Any] = field(default_factory=dict)


class ReportNotifier:
    """Announce a stored report to the admin mailbox.

    No mail transport is wired in; the message is logged instead of sent.
    """

    def __init__(self, recipient: str) -> None:
        self._recipient = recipient

    @property
    def recipient(self) -> str:
        return self._recipient

    async def send_report(self, payload: dict[str, Any]) -> EmailMessage:
        message = EmailMessage(
            to=self._recipient,
            subject=REPORT_EMAIL_SUBJECT,
            template=REPORT_EMAIL_TEMPLATE,
            data={"summary": payload.get("summary", {}), "timestamp": payload.get("timestamp")},
        )
        logger.info(
            "Sending %s email to %s",
            message.template,
            message.to,
            extra={"subject": message.subject, "summary": message.data["summary"]},
        )
        return message


__all__ = ["EmailMessage", "REPORT_EMAIL_SUBJECT", "REPORT_EMAIL_TEMPLATE", "ReportNotifier"]
