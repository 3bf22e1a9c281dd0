from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from portfolio.core.config import get_settings


def client_ip(request: Request) -> str:
    """IP клиента; за прокси берется адрес, добавленный самим прокси (последний в X-Forwarded-For)"""
    if get_settings().trust_proxy:
        forwarded = request.headers.get("x-forwarded-for", "")
        proxy_hop = forwarded.split(",")[-1].strip()
        if proxy_hop:
            return proxy_hop
    return get_remote_address(request)


limiter = Limiter(key_func=client_ip)


def auth_limit() -> str:
    return get_settings().login_rate_limit


def track_limit() -> str:
    return get_settings().track_rate_limit
