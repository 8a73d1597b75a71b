"""
Analysis Service Client

Handles authentication and communication with an OpenAI-compatible
chat completions endpoint.
"""

import logging
from typing import Dict, List, Optional

import requests

from ..config import LLMConfig
from ..errors import AnalysisCallFailure


logger = logging.getLogger(__name__)


class AnalysisClient:
    """
    Chat completions client requesting JSON-object responses.

    Calls are never retried; failures surface as AnalysisCallFailure.
    """

    def __init__(self, config: LLMConfig):
        """
        Initialize analysis client.

        Args:
            config: Analysis service settings (API key, model, endpoint)
        """
        if not config.api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self.config = config
        self.base_url = config.base_url.rstrip('/')
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with authentication headers."""
        session = requests.Session()
        session.headers.update({
            'Authorization': f'Bearer {self.config.api_key}',
            'Content-Type': 'application/json',
            'User-Agent': 'Code-Review-Bot/1.0'
        })
        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to the analysis service.

        Args:
            method: HTTP method
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            AnalysisCallFailure: For transport errors and error statuses
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.config.timeout_seconds)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise AnalysisCallFailure(f"Failed to reach analysis service: {e}")

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"Analysis service error: {response.status_code} - {message}")
            raise AnalysisCallFailure(
                f"Analysis service error: {response.status_code} - {message}",
                status_code=response.status_code
            )

        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Best-effort error message from an error response body."""
        try:
            data = response.json()
        except ValueError:
            return response.text or 'Unknown error'
        error = data.get('error') if isinstance(data, dict) else None
        if isinstance(error, dict):
            return error.get('message', 'Unknown error')
        return str(error or 'Unknown error')

    def complete(self, messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
        """
        Request a JSON-object chat completion.

        Args:
            messages: Chat messages (system and user)
            model: Model override; defaults to the configured model

        Returns:
            Text content of the first choice

        Raises:
            AnalysisCallFailure: If the call fails or the response has no content
        """
        payload = {
            'model': model or self.config.model,
            'messages': messages,
            'temperature': self.config.temperature,
            'max_tokens': self.config.max_tokens,
            'response_format': {'type': 'json_object'},
        }

        logger.info(f"Requesting completion from {payload['model']}")
        response = self._make_request('POST', '/chat/completions', json=payload)

        try:
            content = response.json()['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AnalysisCallFailure(f"Malformed completion response: {e}")

        if content is None:
            raise AnalysisCallFailure("Completion response has no content")

        logger.debug(f"Received {len(content)} characters")
        return content

    def close(self) -> None:
        self.session.close()
