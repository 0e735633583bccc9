"""
Article data model.
"""
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field


class Article(BaseModel):
    """A published post: title, intro, body paragraphs and an image reference."""

    title: str
    intro: str = ""
    # Snapshots from the first version of the site store the body as one string.
    content: Union[List[str], str] = Field(default_factory=list)
    image_path: str = ""

    model_config = {"frozen": True}

    @property
    def paragraphs(self) -> List[str]:
        """Body of the article as a list of paragraphs."""
        if isinstance(self.content, str):
            return split_paragraphs(self.content)
        return list(self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the snapshot representation."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        """Build an article from its snapshot representation."""
        return cls.model_validate(data)


def split_paragraphs(text: str) -> List[str]:
    """
    Split free text into paragraphs on blank lines.

    Args:
        text: Raw text, e.g. from a form textarea

    Returns:
        Non-empty, stripped paragraphs in order
    """
    normalized = text.replace("\r\n", "\n")
    return [block.strip() for block in normalized.split("\n\n") if block.strip()]
