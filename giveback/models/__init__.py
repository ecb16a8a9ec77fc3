from giveback.models.activity_log import ActivityLog
from giveback.models.announcement import Announcement
from giveback.models.base import Base
from giveback.models.profile import Profile
from giveback.models.wishlist import Wishlist

__all__ = ["ActivityLog", "Announcement", "Base", "Profile", "Wishlist"]
