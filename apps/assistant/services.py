"""
Draft assistant operations.

Runs outside any database transaction and never touches articles.
"""

import logging
from typing import Dict, List, Optional

from .llm import AssistantClient
from .parsing import parse_complete, parse_seo, parse_summary, parse_tags

logger = logging.getLogger(__name__)

HI_TO_EN = 'HI_TO_EN'
EN_TO_HI = 'EN_TO_HI'
DIRECTIONS = {
    HI_TO_EN: ('Hindi', 'English'),
    EN_TO_HI: ('English', 'Hindi'),
}


class DraftAssistant:

    def __init__(self, client: Optional[AssistantClient] = None):
        self.client = client or AssistantClient()

    def summarize(self, content: str) -> List[str]:
        response = self.client.run_template('summary', {'content': content})
        return parse_summary(response)

    def suggest_tags(self, content: str) -> List[str]:
        response = self.client.run_template('tags', {'content': content})
        return parse_tags(response)

    def generate_seo(self, title: str, content: str) -> Dict[str, object]:
        response = self.client.run_template('seo', {'title': title, 'content': content})
        return parse_seo(response)

    def translate(self, content: str, direction: str) -> str:
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown translation direction: {direction}")
        source_language, target_language = DIRECTIONS[direction]
        response = self.client.run_template('translate', {
            'content': content,
            'source_language': source_language,
            'target_language': target_language,
        })
        return response.strip()

    def complete(self, title: str, content: str) -> Dict[str, object]:
        response = self.client.run_template('complete', {'title': title, 'content': content})
        result = parse_complete(response)
        if not any((result['summary'], result['tags'], result['seo']['title'])):
            logger.warning("Complete-assist response had no recognizable sections")
        return result
