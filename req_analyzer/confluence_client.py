import requests
from typing import Optional
import logging
import re

from .exceptions import ConfigError, FetchError
from .models import PageReference

logger = logging.getLogger(__name__)

CONFLUENCE_URL_MARKER = "atlassian.net/wiki/spaces"

_PAGE_URL_PATTERN = re.compile(r'atlassian\.net/wiki/spaces/([^/]+)/pages/(\d+)')

# Applied top to bottom; the catch-all tag rule must run after the
# structural rules that turn specific tags into line breaks and bullets.
_STORAGE_TO_TEXT_RULES = [
    (re.compile(r'<br\s*/?>', re.IGNORECASE), '\n'),
    (re.compile(r'</p>', re.IGNORECASE), '\n\n'),
    (re.compile(r'</h[1-6]>', re.IGNORECASE), '\n\n'),
    (re.compile(r'<li>', re.IGNORECASE), '• '),
    (re.compile(r'</li>', re.IGNORECASE), '\n'),
    (re.compile(r'<[^>]+>'), ''),
    (re.compile(r'&nbsp;'), ' '),
    (re.compile(r'\n\s*\n'), '\n\n'),
]


def resolve_page_reference(url: str) -> Optional[PageReference]:
    """Extract space key and page ID from a Confluence page URL.

    Accepts an optional leading ``@`` (pasted mentions carry one). Returns
    ``None`` when the URL does not follow the ``/wiki/spaces/<SPACE>/pages/<ID>``
    shape.
    """
    clean_url = url[1:] if url.startswith('@') else url

    match = _PAGE_URL_PATTERN.search(clean_url)
    if not match:
        return None

    return PageReference(space_key=match.group(1), page_id=match.group(2))


def convert_storage_to_text(content: str) -> str:
    """Convert Confluence storage format to plain text, keeping paragraph and list structure"""
    for pattern, replacement in _STORAGE_TO_TEXT_RULES:
        content = pattern.sub(replacement, content)
    return content.strip()


class ConfluenceClient:
    """Confluence Cloud REST client for fetching page bodies"""

    def __init__(self, domain: str, email: str, api_token: str, timeout: int = 30):
        self.domain = (domain or '').strip().rstrip('/')
        if self.domain.startswith('https://'):
            self.domain = self.domain[len('https://'):]
        self.email = email
        self.api_token = api_token
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'Content-Type': 'application/json'
        })

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}/wiki"

    def _ensure_configured(self):
        if not self.domain or not self.api_token or not self.email:
            raise ConfigError("Confluence API credentials not configured")

    def fetch_page_storage(self, page_id: str) -> str:
        """Fetch the storage-format body of a page.

        Raises:
            ConfigError: domain, email or API token is not set
            FetchError: the request failed, or the page has no body
        """
        self._ensure_configured()

        url = f"{self.base_url}/rest/api/content/{page_id}"
        params = {'expand': 'body.storage,space,version'}

        try:
            response = self.session.get(
                url,
                params=params,
                auth=(self.email, self.api_token),
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to reach Confluence for page {page_id}: {e}")
            raise FetchError(f"Confluence API error: {e}") from e

        if not response.ok:
            logger.error(
                f"Confluence API error details: status={response.status_code}, "
                f"reason={response.reason}, page_id={page_id}, domain={self.domain}, "
                f"error={response.text[:500]}"
            )
            raise FetchError(f"Confluence API error: {response.reason}")

        try:
            data = response.json()
        except ValueError as e:
            # SSO and proxy error pages come back as 200 with an HTML body
            logger.error(f"Confluence returned a non-JSON response for page {page_id}: {response.text[:500]}")
            raise FetchError(f"Invalid Confluence response: {e}") from e

        body = data.get('body') if isinstance(data, dict) else None
        storage = body.get('storage') if isinstance(body, dict) else None
        value = storage.get('value') if isinstance(storage, dict) else None
        if not value or not isinstance(value, str):
            raise FetchError("No content found in Confluence response")

        logger.info(f"Fetched page {page_id} ({len(value)} characters of storage format)")
        return value

    def test_connection(self) -> bool:
        """Test if the Confluence credentials work"""
        try:
            self._ensure_configured()
            response = self.session.get(
                f"{self.base_url}/rest/api/space",
                params={'limit': 1},
                auth=(self.email, self.api_token),
                timeout=self.timeout
            )
            return response.ok
        except (ConfigError, requests.exceptions.RequestException) as e:
            logger.error(f"Confluence connection test failed: {e}")
            return False
