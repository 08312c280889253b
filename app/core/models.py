from datetime import datetime
from typing import Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class LinkMetadata:
    """
    Preview metadata for a single URL, produced fresh on every fetch
    """
    url: str
    title: str
    domain: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    favicon: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the metadata to its JSON wire shape, omitting absent fields"""
        result = {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "favicon": self.favicon,
            "domain": self.domain,
        }
        return {key: value for key, value in result.items() if value is not None}


@dataclass
class Link:
    """
    A saved link as held by the storage collaborator.

    Only the metadata fields, the fetch timestamp and the refresh flag are
    read or written by this service.
    """
    id: str
    url: str
    title: str = ""
    domain: str = ""
    description: Optional[str] = None
    image_url: Optional[str] = None
    favicon: Optional[str] = None
    metadata_fetched_at: Optional[datetime] = None
    needs_metadata_refresh: bool = False
