import asyncio
from types import ModuleType
from typing import Dict, Optional

from leadrelay.channels import mailer, telegram
from leadrelay.config import Settings, settings
from leadrelay.models.delivery import ChannelResult, DeliveryReport
from leadrelay.utils.logger import get_logger

logger = get_logger(__name__)

# Channel name -> module exposing send(text, config) and is_configured(config).
CHANNELS: Dict[str, ModuleType] = {
    telegram.NAME: telegram,
    mailer.NAME: mailer,
}


def channel_status(config: Optional[Settings] = None) -> Dict[str, bool]:
    return {name: channel.is_configured(config) for name, channel in CHANNELS.items()}


def _is_success(results: Dict[str, ChannelResult], policy: str) -> bool:
    if policy == "any":
        return any(result.ok for result in results.values())
    return all(result.ok for result in results.values())


def _failure_reason(results: Dict[str, ChannelResult]) -> str:
    return "; ".join(
        f"{name}: {result.reason or result.status.value}"
        for name, result in results.items()
        if not result.ok
    )


async def deliver_lead(text: str, config: Optional[Settings] = None) -> DeliveryReport:
    """
    Send ``text`` to every channel at once and wait for all of them.

    Each channel runs in its own worker thread with its own timeout and retry
    policy. A failing or slow channel never cancels the others, and an exception
    escaping a channel is recorded as that channel's failure.
    """
    cfg = config or settings
    names = list(CHANNELS)
    outcomes = await asyncio.gather(
        *(asyncio.to_thread(CHANNELS[name].send, text, cfg) for name in names),
        return_exceptions=True,
    )

    results: Dict[str, ChannelResult] = {}
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, BaseException):
            logger.error("Channel %s raised %s: %s", name, type(outcome).__name__, outcome)
            outcome = ChannelResult.failed(f"{type(outcome).__name__}: {outcome}")
        results[name] = outcome

    ok = _is_success(results, cfg.success_policy)
    report = DeliveryReport(
        results=results,
        ok=ok,
        error=None if ok else _failure_reason(results),
    )
    logger.info(
        "Lead delivery finished ok=%s (%s)",
        report.ok,
        ", ".join(f"{name}={result.status.value}" for name, result in results.items()),
    )
    return report
