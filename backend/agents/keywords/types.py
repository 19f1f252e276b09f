"""
Type definitions for the keyword generation workflow.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

GenerationSource = Literal["ai", "fallback"]


@dataclass
class CrawlResult:
    """Text extracted from one crawled URL. Never persisted."""

    title: str = ""
    description: str = ""
    content: str = ""

    def is_empty(self) -> bool:
        return not (self.title or self.description or self.content)


@dataclass
class GenerationResult:
    """Outcome of one keyword generation run."""

    keywords: Dict[str, List[str]]
    source: GenerationSource
    error_category: Optional[str] = None
    crawled_sources: List[str] = field(default_factory=list)
