"""Email channel registry.

FakeEmailAdapter by default; EMAIL_ADAPTER=web3forms selects the
Web3Forms adapter keyed by WEB3FORMS_KEY.
"""

from notifications.channel.email_port import EmailPort
from shared.config import get_settings

_email_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_channel
    if _email_channel is None:
        settings = get_settings()
        adapter = settings.adapter("email")
        if adapter == "fake":
            from notifications.channel.fake_email import FakeEmailAdapter

            _email_channel = FakeEmailAdapter()
        elif adapter == "web3forms":
            from notifications.channel.web3forms import Web3FormsEmailAdapter

            _email_channel = Web3FormsEmailAdapter(settings.web3forms_key)
        else:
            raise ValueError(f"Unknown email adapter: {adapter}")
    return _email_channel


def set_email_channel(channel: EmailPort) -> None:
    global _email_channel
    _email_channel = channel


def reset_channels():
    """Reset the channel singleton (useful for testing)."""
    global _email_channel
    _email_channel = None
