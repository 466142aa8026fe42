"""
الترجمة - تسميات القوائم بالعربية والإنجليزية
"""
import enum
from typing import Dict, List, Optional, Type

from schoolneeds.config import settings
from schoolneeds.core.constants import (
    NeedCategory,
    NeedPriority,
    NeedStatus,
    SchoolStatus,
    Governorate,
    EducationLevel,
)

SUPPORTED_LANGUAGES = ("ar", "en")
FALLBACK_LANGUAGE = "en"

LABELS: Dict[str, Dict[str, Dict[str, str]]] = {
    "categories": {
        "furniture": {"ar": "أثاث", "en": "Furniture"},
        "equipment": {"ar": "معدات", "en": "Equipment"},
        "outdoor": {"ar": "مرافق خارجية", "en": "Outdoor Facilities"},
        "supplies": {"ar": "لوازم مدرسية", "en": "School Supplies"},
        "maintenance": {"ar": "صيانة وإصلاحات", "en": "Maintenance & Repairs"},
        "technology": {"ar": "تقنية", "en": "Technology"},
        "other": {"ar": "أخرى", "en": "Other"},
    },
    "priorities": {
        "low": {"ar": "منخفضة", "en": "Low"},
        "medium": {"ar": "متوسطة", "en": "Medium"},
        "high": {"ar": "عالية", "en": "High"},
    },
    "need_statuses": {
        "pending": {"ar": "معلق", "en": "Pending"},
        "in_progress": {"ar": "قيد التنفيذ", "en": "In Progress"},
        "fulfilled": {"ar": "تمت التلبية", "en": "Fulfilled"},
    },
    "school_statuses": {
        "pending": {"ar": "بانتظار الموافقة", "en": "Pending"},
        "approved": {"ar": "معتمدة", "en": "Approved"},
        "rejected": {"ar": "مرفوضة", "en": "Rejected"},
    },
    "governorates": {
        "damascus": {"ar": "دمشق", "en": "Damascus"},
        "rif_dimashq": {"ar": "ريف دمشق", "en": "Rif Dimashq"},
        "aleppo": {"ar": "حلب", "en": "Aleppo"},
        "homs": {"ar": "حمص", "en": "Homs"},
        "hama": {"ar": "حماة", "en": "Hama"},
        "latakia": {"ar": "اللاذقية", "en": "Latakia"},
        "tartus": {"ar": "طرطوس", "en": "Tartus"},
        "deir_ez_zor": {"ar": "دير الزور", "en": "Deir ez-Zor"},
        "raqqa": {"ar": "الرقة", "en": "Raqqa"},
        "hasakah": {"ar": "الحسكة", "en": "Hasakah"},
        "daraa": {"ar": "درعا", "en": "Daraa"},
        "suwayda": {"ar": "السويداء", "en": "Suwayda"},
        "quneitra": {"ar": "القنيطرة", "en": "Quneitra"},
        "idlib": {"ar": "إدلب", "en": "Idlib"},
    },
    "education_levels": {
        "primary": {"ar": "ابتدائية", "en": "Primary School"},
        "middle": {"ar": "إعدادية", "en": "Middle School"},
        "high_school": {"ar": "ثانوية", "en": "High School"},
        "mixed": {"ar": "مختلطة المراحل", "en": "Mixed Levels"},
    },
}

GROUP_ENUMS: Dict[str, Type[enum.Enum]] = {
    "categories": NeedCategory,
    "priorities": NeedPriority,
    "need_statuses": NeedStatus,
    "school_statuses": SchoolStatus,
    "governorates": Governorate,
    "education_levels": EducationLevel,
}


def resolve_language(requested: Optional[str] = None, accept_language: Optional[str] = None) -> str:
    """Pick the response language: explicit choice, then Accept-Language, then the default."""
    if requested and requested.lower() in SUPPORTED_LANGUAGES:
        return requested.lower()
    if accept_language:
        for part in accept_language.split(","):
            code = part.split(";")[0].strip().lower()[:2]
            if code in SUPPORTED_LANGUAGES:
                return code
    return settings.DEFAULT_LANGUAGE


def translate(group: str, value, lang: str) -> str:
    key = getattr(value, "value", value)
    labels = LABELS.get(group, {}).get(key)
    if not labels:
        return str(key)
    return labels.get(lang) or labels.get(FALLBACK_LANGUAGE) or str(key)


def options(group: str, lang: str) -> List[dict]:
    """قائمة الخيارات بالترتيب المعرّف في التعداد"""
    return [
        {"value": member.value, "label": translate(group, member.value, lang)}
        for member in GROUP_ENUMS[group]
    ]
