from typing import Dict, Optional
from datetime import datetime

import requests

from sitegrades.config.settings import settings
from sitegrades.utils.log import app_logger


class Notifier:
    """Notifier that can emit messages to Slack and Discord via incoming webhooks.

    Behavior:
    - Enabled platforms come from `SLACK_WEBHOOK_URL` and `DISCORD_WEBHOOK_URL` settings.
    - If none are configured, falls back to logging only.
    - `notify_unknown_domain` is fire-and-forget: webhook failures are logged, never raised.
    """

    TIMEOUT = 5

    def __init__(
        self,
        slack_url: Optional[str] = None,
        discord_url: Optional[str] = None,
        slack_mention: Optional[str] = None,
        discord_mention: Optional[str] = None,
    ):
        self.slack_url = slack_url if slack_url is not None else settings.SLACK_WEBHOOK_URL
        self.discord_url = discord_url if discord_url is not None else settings.DISCORD_WEBHOOK_URL
        # mention configuration: 'here'/'channel' for Slack, 'everyone'/'here' for Discord
        self.slack_mention = (slack_mention if slack_mention is not None else settings.SLACK_MENTION).strip().lower()
        self.discord_mention = (discord_mention if discord_mention is not None else settings.DISCORD_MENTION).strip().lower()
        if self.slack_url:
            app_logger.info("notifier.init", platform="slack", webhook=self._redact(self.slack_url))
        if self.discord_url:
            app_logger.info("notifier.init", platform="discord", webhook=self._redact(self.discord_url))

    def _redact(self, v: str) -> str:
        # show only the last path segment of the webhook URL
        parsed = v.rstrip('/').split('/')
        return f".../{parsed[-1]}" if len(parsed) > 1 else "(redacted)"

    def _post(self, platform: str, url: str, body: Dict, domain: str) -> bool:
        try:
            resp = requests.post(url, json=body, timeout=self.TIMEOUT)
        except requests.RequestException as e:
            app_logger.error(f"notifier.{platform}_exception", error=str(e), domain=domain)
            return False

        if resp.status_code >= 400:
            app_logger.error(f"notifier.{platform}_error", status=resp.status_code, body=resp.text)
            return False
        app_logger.debug(f"notifier.{platform}_sent", domain=domain)
        return True

    def _send_slack(self, domain: str, requested_at: datetime) -> bool:
        mention_text = ""
        if self.slack_mention == "here":
            mention_text = "<!here> "
        elif self.slack_mention == "channel":
            mention_text = "<!channel> "

        ts = requested_at.strftime("%Y-%m-%d %H:%M")
        body = {
            "text": f"{mention_text}Unknown domain requested: {domain}",
            "blocks": [
                {"type": "section", "text": {"type": "mrkdwn", "text": f"*{ts}* `{domain}` has no grade yet"}},
                {"type": "context", "elements": [{"type": "mrkdwn", "text": "sitegrades"}]},
            ],
        }
        return self._post("slack", self.slack_url, body, domain)

    def _send_discord(self, domain: str, requested_at: datetime) -> bool:
        # Discord embed limits: title max 256 chars, description max 4096 chars
        embed = {
            "title": "Unknown domain requested",
            "description": f"**{domain[:4000]}** has no grade yet",
            "timestamp": requested_at.isoformat(),
            "footer": {"text": "sitegrades"},
        }
        body = {"embeds": [embed]}
        # Discord mentions must be sent in the `content` field (not inside embeds)
        if self.discord_mention == "everyone":
            body["content"] = "@everyone"
        elif self.discord_mention == "here":
            body["content"] = "@here"
        return self._post("discord", self.discord_url, body, domain)

    def notify_unknown_domain(self, domain: str, requested_at: Optional[datetime] = None) -> None:
        """Called when a domain with no stored site is requested.

        Always logs the event locally, then posts to every configured platform.
        """
        requested_at = requested_at or datetime.now()
        app_logger.info("notifier.unknown_domain", domain=domain, requested_at=requested_at.isoformat())

        if self.slack_url:
            self._send_slack(domain, requested_at)
        if self.discord_url:
            self._send_discord(domain, requested_at)


notifier = Notifier()


def get_notifier() -> Notifier:
    return notifier
