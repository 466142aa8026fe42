import enum


class UserRole(str, enum.Enum):
    """أدوار المستخدمين"""
    ADMIN = "admin"               # الإدارة والمانحون
    PRINCIPAL = "principal"       # مدير المدرسة


class NeedCategory(str, enum.Enum):
    """تصنيفات الاحتياجات"""
    FURNITURE = "furniture"       # أثاث
    EQUIPMENT = "equipment"       # معدات
    OUTDOOR = "outdoor"           # مرافق خارجية
    SUPPLIES = "supplies"         # لوازم مدرسية
    MAINTENANCE = "maintenance"   # صيانة وإصلاحات
    TECHNOLOGY = "technology"     # تقنية
    OTHER = "other"               # أخرى


class NeedPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NeedStatus(str, enum.Enum):
    """حالات الاحتياج - أي حالة يمكن أن تلي أي حالة"""
    PENDING = "pending"           # معلق
    IN_PROGRESS = "in_progress"   # قيد التنفيذ
    FULFILLED = "fulfilled"       # تمت تلبيته


class SchoolStatus(str, enum.Enum):
    """حالة المدرسة - المعتمدة فقط تظهر للعموم"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Governorate(str, enum.Enum):
    """المحافظات السورية الأربع عشرة"""
    DAMASCUS = "damascus"
    RIF_DIMASHQ = "rif_dimashq"
    ALEPPO = "aleppo"
    HOMS = "homs"
    HAMA = "hama"
    LATAKIA = "latakia"
    TARTUS = "tartus"
    DEIR_EZ_ZOR = "deir_ez_zor"
    RAQQA = "raqqa"
    HASAKAH = "hasakah"
    DARAA = "daraa"
    SUWAYDA = "suwayda"
    QUNEITRA = "quneitra"
    IDLIB = "idlib"


class EducationLevel(str, enum.Enum):
    PRIMARY = "primary"
    MIDDLE = "middle"
    HIGH_SCHOOL = "high_school"
    MIXED = "mixed"


class SortKey(str, enum.Enum):
    """مفاتيح ترتيب القوائم"""
    NEWEST = "newest"
    OLDEST = "oldest"
    PRIORITY = "priority"


class NotificationType(str, enum.Enum):
    SCHOOL_REGISTERED = "school_registered"
    SCHOOL_APPROVED = "school_approved"
    SCHOOL_REJECTED = "school_rejected"
    NEED_SUBMITTED = "need_submitted"
    NEED_FULFILLED = "need_fulfilled"


class AuditAction(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    APPROVED = "approved"
    REJECTED = "rejected"
    FULFILLED = "fulfilled"
    DELETED = "deleted"


class ExportScope(str, enum.Enum):
    ALL = "all"
    FILTERED = "filtered"
    SELECTED = "selected"


# قيمة "الكل" في الفلاتر - تعني عدم التقييد
ALL = "all"

# ترتيب الأولوية: العالية أولاً
PRIORITY_RANK = {
    NeedPriority.HIGH.value: 1,
    NeedPriority.MEDIUM.value: 2,
    NeedPriority.LOW.value: 3,
}
UNKNOWN_PRIORITY_RANK = 4

# الجداول التي تبث أحداث التغيير
REALTIME_TABLES = ("needs", "schools", "notifications")


class ChangeType(str, enum.Enum):
    """أنواع أحداث التغيير الفورية"""
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
