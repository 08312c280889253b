"""
Platform-specific metadata extraction strategies
"""

from .base import MetadataExtractorInterface, fallback_metadata
from .generic import GenericExtractor
from .video import VideoHostExtractor
from .forum import ForumDiscussionExtractor
from .social import SocialShortFormExtractor

__all__ = [
    'MetadataExtractorInterface',
    'fallback_metadata',
    'GenericExtractor',
    'VideoHostExtractor',
    'ForumDiscussionExtractor',
    'SocialShortFormExtractor'
]
