from portfolio.domains.analytics.entities import VisitorSession, anonymize_ip, detect_device
from portfolio.domains.analytics.schemas import TrackRequest, VisitorResponse

__all__ = [
    "VisitorSession", "anonymize_ip", "detect_device",
    "TrackRequest", "VisitorResponse"
]
