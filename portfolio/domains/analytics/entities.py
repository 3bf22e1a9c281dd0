import ipaddress
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

ANONYMOUS_IP = "anonymous"

DEVICE_DESKTOP = "desktop"
DEVICE_MOBILE = "mobile"
DEVICE_TABLET = "tablet"

_MOBILE_MARKERS = ("mobile", "android", "iphone")
_TABLET_MARKERS = ("tablet", "ipad")


def anonymize_ip(ip: Optional[str]) -> str:
    """Обнуление двух последних октетов IPv4; все остальное становится 'anonymous'"""
    if not ip:
        return ANONYMOUS_IP

    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return ANONYMOUS_IP

    if isinstance(address, ipaddress.IPv6Address):
        if address.ipv4_mapped is None:
            return ANONYMOUS_IP
        address = address.ipv4_mapped

    first, second = str(address).split(".")[:2]
    return f"{first}.{second}.0.0"


def detect_device(user_agent: Optional[str]) -> str:
    """Грубое определение типа устройства по User-Agent"""
    ua = (user_agent or "").lower()
    if any(marker in ua for marker in _MOBILE_MARKERS):
        return DEVICE_MOBILE
    if any(marker in ua for marker in _TABLET_MARKERS):
        return DEVICE_TABLET
    return DEVICE_DESKTOP


def utc_day(moment: datetime) -> date:
    """День по UTC; наивные значения из БД считаются UTC"""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


class PageView:
    """Просмотр страницы в рамках сессии"""

    def __init__(self, path: str, timestamp: datetime, duration: Optional[float] = None):
        self.path = path
        self.timestamp = timestamp
        self.duration = duration

    def __repr__(self) -> str:
        return f"PageView(path={self.path}, timestamp={self.timestamp})"


class VisitorSession:
    """Сессия посетителя со списком просмотренных страниц"""

    def __init__(
        self,
        id: uuid.UUID,
        session_id: str,
        ip_address: str = ANONYMOUS_IP,
        user_agent: str = "",
        referrer: Optional[str] = None,
        device: str = DEVICE_DESKTOP,
        pages: Optional[List[PageView]] = None,
        first_visit: Optional[datetime] = None,
        last_visit: Optional[datetime] = None
    ):
        self.id = id
        self.session_id = session_id
        self.ip_address = ip_address
        self.user_agent = user_agent
        self.referrer = referrer
        self.device = device
        self.pages = list(pages or [])
        self.first_visit = first_visit or datetime.now(timezone.utc)
        self.last_visit = last_visit or self.first_visit

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def __eq__(self, other) -> bool:
        if not isinstance(other, VisitorSession):
            return False
        return self.session_id == other.session_id

    def __repr__(self) -> str:
        return f"VisitorSession(session_id={self.session_id}, pages={self.page_count})"
