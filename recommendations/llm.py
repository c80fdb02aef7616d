"""
Client for an OpenAI-compatible chat completions endpoint (Groq by default).
"""
import logging

import requests
from django.conf import settings

from moodreel.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_TEXT = 'No recommendations generated.'


class LLMClient:
    def __init__(self, api_key=None, base_url=None, model=None, timeout=None):
        self.api_key = api_key if api_key is not None else settings.LLM_API_KEY
        self.base_url = (base_url or settings.LLM_BASE_URL).rstrip('/')
        self.model = model or settings.LLM_MODEL
        self.timeout = timeout or settings.LLM_TIMEOUT

    def complete(self, system_prompt, user_prompt, model=None, temperature=0.8, max_tokens=1000):
        """
        Sends one system + user exchange and returns the raw reply text.
        Any transport or service error raises UpstreamFailure.
        """
        if not self.api_key:
            raise UpstreamFailure('Language model API key is not configured.')

        payload = {
            'model': model or self.model,
            'messages': [
                {'role': 'system', 'content': system_prompt},
                {'role': 'user', 'content': user_prompt},
            ],
            'temperature': temperature,
            'max_tokens': max_tokens,
        }
        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        }

        try:
            resp = requests.post(f"{self.base_url}/chat/completions", headers=headers, json=payload, timeout=self.timeout)
        except requests.Timeout:
            logger.error("Language model request timed out")
            raise UpstreamFailure('Language model request timed out.')
        except requests.RequestException as e:
            logger.error(f"Language model request failed: {e}")
            raise UpstreamFailure('Failed to reach the language model.')

        if resp.status_code != 200:
            logger.error(f"Language model returned {resp.status_code}: {resp.text[:500]}")
            raise UpstreamFailure('Failed to generate recommendations from AI.')

        try:
            data = resp.json()
        except ValueError:
            raise UpstreamFailure('Language model returned an unreadable response.')
        if not isinstance(data, dict):
            raise UpstreamFailure('Language model returned an unexpected payload.')

        try:
            choices = data.get('choices') or []
            if not choices:
                return EMPTY_RESPONSE_TEXT
            content = (choices[0].get('message') or {}).get('content')
        except (AttributeError, KeyError, TypeError) as e:
            raise UpstreamFailure(f"Unexpected language model payload: {e}")
        if content is not None and not isinstance(content, str):
            raise UpstreamFailure('Language model returned an unexpected payload.')
        return content or EMPTY_RESPONSE_TEXT
