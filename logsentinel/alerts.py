"""
Alert emission: hand each detected burst to storage and notification.

Storage and notification are injected so the detection core stays pure.
Each alert is handled on its own: a failing store or mail server is
logged and the remaining alerts are still processed.
"""

from typing import List, Optional, Protocol, Sequence

from . import logger
from .detector import BurstAlert


class AlertStore(Protocol):
    def create(self, record: dict) -> dict:
        ...


class Notifier(Protocol):
    def notify(self, recipient: str, subject: str, body: str) -> bool:
        ...


def format_subject(alert: BurstAlert) -> str:
    return f"Suspicious IP: {alert.source_address}"


def format_body(alert: BurstAlert) -> str:
    return (
        f"IP: {alert.source_address}\n"
        f"Attempts: {alert.attempt_count}\n"
        f"Window: {alert.window_seconds:.2f}s"
    )


def emit_alert(
    alert: BurstAlert,
    store: Optional[AlertStore] = None,
    notifier: Optional[Notifier] = None,
    recipient: Optional[str] = None,
) -> Optional[dict]:
    """
    Persist and notify one alert. Never raises.

    Returns the stored record, or None if there is no store or it failed.
    """
    stored = None
    logger.log_warn(
        "Brute force burst detected",
        ip=alert.source_address,
        attempt_count=alert.attempt_count,
        window_seconds=round(alert.window_seconds, 2),
    )

    if store is not None:
        try:
            stored = store.create(alert.to_record())
        except Exception as e:
            logger.log_error("Could not persist alert", ip=alert.source_address, error=str(e))

    if notifier is None:
        return stored
    if not recipient:
        logger.log_info("No notification recipient; skipping notification", ip=alert.source_address)
        return stored
    try:
        sent = notifier.notify(recipient, format_subject(alert), format_body(alert))
    except Exception as e:
        logger.log_error("Notification raised", ip=alert.source_address, error=str(e))
        return stored
    if not sent:
        logger.log_warn("Notification not delivered", ip=alert.source_address, recipient=recipient)
    return stored


def emit_alerts(
    alerts: Sequence[BurstAlert],
    store: Optional[AlertStore] = None,
    notifier: Optional[Notifier] = None,
    recipient: Optional[str] = None,
) -> List[dict]:
    """Emit every alert; returns the records that were stored successfully."""
    stored = []
    for alert in alerts:
        record = emit_alert(alert, store=store, notifier=notifier, recipient=recipient)
        if record is not None:
            stored.append(record)
    return stored
