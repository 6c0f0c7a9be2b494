"""TwiML documents handed to Twilio when a call is placed."""

from xml.sax.saxutils import quoteattr


def build_connect_twiml(stream_url: str) -> str:
    """Instruct Twilio to connect the call audio to a bidirectional media stream."""
    return (
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>"
        "<Response>"
        "<Connect>"
        f"<Stream url={quoteattr(stream_url)} />"
        "</Connect>"
        "</Response>"
    )
