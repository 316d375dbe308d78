"""osu! API v1 client for fetching profiles, best scores and beatmap files"""
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from typing import Any, List, Optional
import logging
from pathlib import Path

from src.base import ScoreData, UserData
from src.utils.validators import parse_score, parse_user

logger = logging.getLogger(__name__)


class OsuApiError(RuntimeError):
    """The osu! API could not serve a request"""


class OsuApiClient:
    """Client for osu! API v1 endpoints"""

    BASE_URL = "https://osu.ppy.sh"

    def __init__(
        self,
        api_key: str,
        cache_dir: Path,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: int = 30,
    ):
        """
        Initialize the osu! API client

        Args:
            api_key: API key from https://osu.ppy.sh/p/api
            cache_dir: Directory holding downloaded .osu files
            session: Optional requests.Session to reuse. If None, creates a new session.
            base_url: Override for the site root
            timeout: Per-request timeout in seconds
        """
        if not api_key:
            raise OsuApiError("An osu! API key is required")

        self.api_key = api_key
        self.cache_dir = Path(cache_dir)
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or self._init_http_session()

    def _init_http_session(self) -> requests.Session:
        """
        Initialize HTTP session with retry logic

        Returns:
            Configured requests.Session
        """
        session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=10,
            pool_maxsize=10,
            max_retries=Retry(
                total=3,
                backoff_factor=0.5,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET", "HEAD"]
            )
        )

        session.mount("https://", adapter)
        session.mount("http://", adapter)

        session.headers.update({
            'User-Agent': 'ProfilePP/1.0',
            'Accept': 'application/json',
        })

        return session

    @staticmethod
    def _user_type(user: str, by_username: bool = False) -> str:
        if by_username:
            return "string"
        return "id" if str(user).isdigit() else "string"

    def _get(self, url: str, params: Optional[dict] = None) -> requests.Response:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response
        except requests.HTTPError as e:
            logger.error(f"HTTP error fetching {url}: {e}")
            raise OsuApiError(f"Request to {url} failed: {e}") from e
        except requests.RequestException as e:
            logger.error(f"Network error fetching {url}: {e}")
            raise OsuApiError(f"Request to {url} failed: {e}") from e

    def _get_json(self, endpoint: str, **params) -> Any:
        params = {"k": self.api_key, **params}
        response = self._get(f"{self.base_url}/api/{endpoint}", params=params)

        try:
            payload = response.json()
        except ValueError as e:
            raise OsuApiError(f"{endpoint} returned invalid JSON") from e

        if isinstance(payload, dict) and "error" in payload:
            raise OsuApiError(f"{endpoint} failed: {payload['error']}")

        return payload

    def get_user(self, user: str, ruleset: int = 0, by_username: bool = False) -> UserData:
        """
        Fetch a user profile

        Calls:
            GET /api/get_user?k=&u=&m=&type=

        Args:
            user: User ID (preferred) or username
            ruleset: Legacy ruleset id (0-3)
            by_username: Look up ``user`` as a name even when it is all digits

        Raises:
            OsuApiError: If the user does not exist or the request fails
            PayloadValidationError: If the payload does not match the schema
        """
        logger.info("Getting user data...")
        payload = self._get_json("get_user", u=user, m=ruleset, type=self._user_type(user, by_username))

        if not isinstance(payload, list) or not payload:
            raise OsuApiError(f"User not found: {user}")

        return parse_user(payload[0])

    def get_user_best(self, user: str, ruleset: int = 0, limit: int = 100,
                      by_username: bool = False) -> List[ScoreData]:
        """
        Fetch a user's best scores, highest pp first

        Calls:
            GET /api/get_user_best?k=&u=&m=&limit=&type=

        Raises:
            OsuApiError: If the request fails
            PayloadValidationError: If any score does not match the schema
        """
        logger.info("Getting user top scores...")
        payload = self._get_json(
            "get_user_best", u=user, m=ruleset, limit=limit, type=self._user_type(user, by_username)
        )

        if not isinstance(payload, list):
            raise OsuApiError(f"get_user_best returned {type(payload).__name__}, expected a list")

        scores = [parse_score(entry) for entry in payload]
        logger.info(f"Fetched {len(scores)} top scores")
        return scores

    def get_beatmap_file(self, beatmap_id: int) -> Path:
        """
        Return the cached .osu file for a beatmap, downloading it if missing

        Calls:
            GET /osu/{beatmap_id}
        """
        cache_path = self.cache_dir / f"{beatmap_id}.osu"
        if cache_path.exists():
            return cache_path

        logger.info(f"Downloading {beatmap_id}.osu...")
        response = self._get(f"{self.base_url}/osu/{beatmap_id}")
        if not response.content:
            raise OsuApiError(f"Beatmap {beatmap_id} returned an empty file")

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = cache_path.with_suffix(".osu.part")
        tmp_path.write_bytes(response.content)
        tmp_path.replace(cache_path)
        return cache_path
