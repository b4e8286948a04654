"""Models package."""

from .share import ShareRecord
from .profile import UserProfile
