# ABOUTME: HTTP client for the remote batch score prediction service.
# ABOUTME: Owns bearer-token login with lazy, lock-guarded refresh on expiry.

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Dict, List, Optional, Sequence

import requests

from .config import PredictionServiceConfig
from .schemas import StudentRecord

logger = logging.getLogger(__name__)

PREDICTION_FEATURES = ("comprehension", "attention", "focus", "retention", "engagement_time")
AUTH_REJECTED_STATUSES = (401, 403)


class PredictionServiceError(Exception):
    """Raised for login, transport, HTTP status, or payload failures."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AuthSession:
    """
    Cached bearer token with an expiry timestamp.

    ``clock`` returns seconds and can be swapped in tests. Refresh is guarded
    by a lock so concurrent callers share one login request.
    """

    def __init__(
        self,
        config: PredictionServiceConfig,
        http: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.http = http or requests.Session()
        self.clock = clock
        self._token: Optional[str] = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    @property
    def is_valid(self) -> bool:
        return self._token is not None and self.clock() < self._expires_at

    def get_token(self) -> str:
        if self.is_valid:
            return self._token
        with self._lock:
            if not self.is_valid:
                self._login()
            return self._token

    def invalidate(self) -> None:
        with self._lock:
            self._token = None
            self._expires_at = 0.0

    def _login(self) -> None:
        url = f"{self.config.base_url}/login"
        try:
            response = self.http.post(
                url,
                json={"username": self.config.username, "password": self.config.password},
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise PredictionServiceError(f"Failed to authenticate with prediction service: {exc}") from exc

        if not response.ok:
            raise PredictionServiceError(f"Authentication failed: {response.reason}", response.status_code)

        try:
            token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as exc:
            raise PredictionServiceError("Authentication response missing access_token") from exc

        self._token = token
        self._expires_at = self.clock() + self.config.token_ttl_seconds
        logger.debug("Obtained prediction service token valid for %ss", self.config.token_ttl_seconds)


class PredictionClient:
    """Requests predicted assessment scores for a batch of students."""

    def __init__(
        self,
        config: PredictionServiceConfig,
        session: Optional[AuthSession] = None,
        http: Optional[requests.Session] = None,
    ):
        self.config = config
        self.http = http or requests.Session()
        self.session = session or AuthSession(config, http=self.http)

    def predict_scores(self, students: Sequence[StudentRecord]) -> List[Optional[float]]:
        """
        Return one predicted score per input position.

        Positions the service leaves without a prediction come back as None.
        """

        payload = {"students": [prediction_features(s) for s in students]}

        response = self._post_predict(payload)
        if response.status_code in AUTH_REJECTED_STATUSES:
            # Token was revoked or expired server-side; log in again once.
            logger.info("Prediction service rejected token (%s); re-authenticating", response.status_code)
            self.session.invalidate()
            response = self._post_predict(payload)

        if not response.ok:
            if response.status_code in AUTH_REJECTED_STATUSES:
                self.session.invalidate()
            raise PredictionServiceError(
                f"Failed to predict student scores: {response.reason}", response.status_code
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise PredictionServiceError("Prediction response is not valid JSON") from exc

        return parse_predictions(body, len(students))

    def _post_predict(self, payload: Dict) -> requests.Response:
        token = self.session.get_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "X-API-Key": self.config.api_key,
        }
        try:
            return self.http.post(
                f"{self.config.base_url}/predict",
                json=payload,
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise PredictionServiceError(f"Network error while predicting student scores: {exc}") from exc


def prediction_features(student: StudentRecord) -> Dict[str, float]:
    return {name: student.value_or_zero(name) for name in PREDICTION_FEATURES}


def parse_predictions(body, expected: int) -> List[Optional[float]]:
    """Map ``{"predictions": [{"predicted_score": ...}, ...]}`` onto input positions."""

    if not isinstance(body, dict) or "predictions" not in body:
        raise PredictionServiceError("Prediction response missing 'predictions'")
    predictions = body["predictions"]
    if not isinstance(predictions, list):
        raise PredictionServiceError("Prediction response 'predictions' must be a list")

    scores: List[Optional[float]] = []
    for index in range(expected):
        entry = predictions[index] if index < len(predictions) else None
        if not entry:
            scores.append(None)
            continue
        try:
            score = float(entry["predicted_score"])
        except (KeyError, TypeError, ValueError) as exc:
            raise PredictionServiceError(f"Malformed prediction at position {index}") from exc
        if not math.isfinite(score):
            raise PredictionServiceError(f"Non-finite prediction at position {index}")
        scores.append(score)
    return scores
