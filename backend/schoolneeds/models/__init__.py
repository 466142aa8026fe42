from schoolneeds.models.user import Profile
from schoolneeds.models.school import School
from schoolneeds.models.need import Need
from schoolneeds.models.audit import Notification, AuditLog
from schoolneeds.models.custom_page import CustomPage

__all__ = [
    "Profile",
    "School",
    "Need",
    "Notification",
    "AuditLog",
    "CustomPage",
]
