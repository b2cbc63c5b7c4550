"""
Prompt templates for the draft assistant.

Each template pins the output format that apps.assistant.parsing expects.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class PromptCategory(Enum):
    """Categories of prompts for organization."""
    SUMMARY = "summary"
    TAGGING = "tagging"
    SEO = "seo"
    TRANSLATION = "translation"
    COMPLETE = "complete"


@dataclass
class PromptTemplate:
    """
    A versioned prompt template with metadata.
    """
    name: str
    category: PromptCategory
    template: str
    system_prompt: Optional[str] = None
    version: str = "1.0"
    description: str = ""
    max_input_chars: Optional[int] = None
    recommended_max_tokens: int = 1024
    temperature: float = 0.7
    tags: List[str] = field(default_factory=list)

    def render(self, **kwargs) -> str:
        """
        Render the template with provided variables.

        Raises:
            ValueError: a required variable is missing.
        """
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing template variable {e} for prompt '{self.name}'")
            raise ValueError(f"Missing required variable: {e}")

    def get_system_prompt(self, **kwargs) -> Optional[str]:
        """Render the system prompt if present."""
        if self.system_prompt:
            try:
                return self.system_prompt.format(**kwargs)
            except KeyError:
                return self.system_prompt
        return None


class PromptRegistry:
    """
    Central registry for all prompt templates, keyed by name and version.
    """

    _instance = None
    _templates: Dict[str, Dict[str, PromptTemplate]] = {}
    _active_versions: Dict[str, str] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._templates = {}
            cls._active_versions = {}
        return cls._instance

    def register(self, template: PromptTemplate, active: bool = True) -> None:
        if template.name not in self._templates:
            self._templates[template.name] = {}

        self._templates[template.name][template.version] = template

        if active or template.name not in self._active_versions:
            self._active_versions[template.name] = template.version

        logger.debug(f"Registered prompt '{template.name}' v{template.version}")

    def get(self, name: str, version: Optional[str] = None) -> Optional[PromptTemplate]:
        """Get a template by name; the active version unless one is given."""
        if name not in self._templates:
            return None

        target_version = version or self._active_versions.get(name)
        return self._templates[name].get(target_version)

    def list_templates(self) -> List[str]:
        return list(self._templates.keys())

    def clear(self) -> None:
        self._templates.clear()
        self._active_versions.clear()


prompt_registry = PromptRegistry()


# =============================================================================
# Built-in Prompt Templates
# =============================================================================

NEWS_EDITOR_SYSTEM = (
    "You are a senior editor at a Hindi daily newspaper. You write clear, "
    "factual, neutral Hindi suited to a news desk. Follow the requested "
    "output format exactly and add nothing else."
)

SUMMARY_V1 = PromptTemplate(
    name="summary",
    category=PromptCategory.SUMMARY,
    description="Three Hindi bullet points summarizing an article",
    system_prompt=NEWS_EDITOR_SYSTEM,
    template=(
        "Summarize the news article below in exactly 3 bullet points, in Hindi.\n"
        "- Each point should be 15-20 words\n"
        "- Focus on the key facts\n\n"
        "Article:\n{content}\n\n"
        "Answer format:\n"
        "• [first key point]\n"
        "• [second key point]\n"
        "• [third key point]"
    ),
    recommended_max_tokens=400,
    temperature=0.4,
    tags=["summary"],
)

TAGS_V1 = PromptTemplate(
    name="tags",
    category=PromptCategory.TAGGING,
    description="5-7 Hindi topic tags",
    system_prompt=NEWS_EDITOR_SYSTEM,
    template=(
        "Suggest 5-7 relevant Hindi tags for the article below.\n"
        "- Each tag is 1-3 words\n"
        "- Prefer news desk categories such as politics, crime, sports, "
        "entertainment, business, technology, health, education\n"
        "- Separate tags with commas\n\n"
        "Article:\n{content}\n\n"
        "Answer format:\n"
        "tag1, tag2, tag3, tag4, tag5"
    ),
    max_input_chars=2000,
    recommended_max_tokens=200,
    temperature=0.4,
    tags=["tagging"],
)

SEO_V1 = PromptTemplate(
    name="seo",
    category=PromptCategory.SEO,
    description="SEO title, meta description and keywords in Hindi",
    system_prompt=NEWS_EDITOR_SYSTEM,
    template=(
        "Prepare SEO metadata in Hindi for the news article below.\n"
        "- SEO title: 50-60 characters, clickable\n"
        "- Meta description: 150-160 characters, summarizing the story\n"
        "- Keywords: 5-7 relevant Hindi keywords\n\n"
        "Article title: {title}\n\n"
        "Article content:\n{content}\n\n"
        "Answer format:\n"
        "SEO_TITLE: [title]\n"
        "META_DESCRIPTION: [description]\n"
        "KEYWORDS: [keyword1, keyword2, keyword3, keyword4, keyword5]"
    ),
    max_input_chars=3000,
    recommended_max_tokens=400,
    temperature=0.5,
    tags=["seo"],
)

TRANSLATE_V1 = PromptTemplate(
    name="translate",
    category=PromptCategory.TRANSLATION,
    description="Hindi <-> English news translation",
    system_prompt=(
        "You are a professional news translator. Preserve meaning and context, "
        "use natural newsroom style, and return only the translated text."
    ),
    template=(
        "Translate the text below from {source_language} to {target_language}.\n\n"
        "Text:\n{content}\n\n"
        "Translation:"
    ),
    recommended_max_tokens=2048,
    temperature=0.3,
    tags=["translation"],
)

COMPLETE_V1 = PromptTemplate(
    name="complete",
    category=PromptCategory.COMPLETE,
    description="Summary, tags and SEO metadata in one call",
    system_prompt=NEWS_EDITOR_SYSTEM,
    template=(
        "Prepare all metadata for the article below, in Hindi.\n\n"
        "Article title: {title}\n\n"
        "Article content:\n{content}\n\n"
        "Answer in exactly this format:\n\n"
        "---SUMMARY---\n"
        "• [first key point, 15-20 words]\n"
        "• [second key point, 15-20 words]\n"
        "• [third key point, 15-20 words]\n\n"
        "---TAGS---\n"
        "tag1, tag2, tag3, tag4, tag5, tag6\n\n"
        "---SEO---\n"
        "SEO_TITLE: [50-60 character title]\n"
        "META_DESCRIPTION: [150-160 character description]\n"
        "KEYWORDS: [keyword1, keyword2, keyword3, keyword4, keyword5]"
    ),
    max_input_chars=4000,
    recommended_max_tokens=1024,
    temperature=0.5,
    tags=["summary", "tagging", "seo"],
)


def register_default_prompts():
    """Register all default prompt templates."""
    defaults = [
        SUMMARY_V1,
        TAGS_V1,
        SEO_V1,
        TRANSLATE_V1,
        COMPLETE_V1,
    ]

    for template in defaults:
        prompt_registry.register(template)

    logger.debug(f"Registered {len(defaults)} assistant prompt templates")
