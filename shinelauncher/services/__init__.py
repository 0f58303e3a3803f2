# Services for shinelauncher
# Account session, install info, news feed and toast notifications.

from .account_service import AccountSessionManager
from .install_info_service import InstallInfoService
from .feed_service import NewsFeedService
from .notification_queue import NotificationQueue, Notification, NotificationType

__all__ = [
    'AccountSessionManager',
    'InstallInfoService',
    'NewsFeedService',
    'NotificationQueue',
    'Notification',
    'NotificationType',
]
