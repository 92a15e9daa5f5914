import re
from urllib.parse import urlparse

from ..exceptions import ValidationError


URL_PATTERN = re.compile(
    r'^https?://'
    r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,63}\.?|'
    r'localhost|'
    r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'
    r'(?::\d+)?'
    r'(?:/?|[/?]\S+)$', re.IGNORECASE
)


def validate_url(url: str) -> None:
    if not url or not URL_PATTERN.match(url):
        raise ValidationError(f"Invalid URL: {url}")


def extract_domain(url: str) -> str:
    return urlparse(url).netloc
