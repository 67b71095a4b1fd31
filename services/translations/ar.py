# -*- coding: utf-8 -*-
"""Arabic translations."""

AR_TRANSLATIONS = {
    # Common
    "common.yes": "نعم",
    "common.no": "لا",
    "common.unknown": "غير معروف",
    "common.system": "النظام",
    "common.no_members": "بدون أفراد مسجلين",
    "common.unassigned": "غير محدد",

    # Validation - family
    "validation.camp_required": "الرجاء اختيار المخيم أولاً",
    "validation.family_number_required": "رقم العائلة مطلوب",
    "validation.address_required": "العنوان مطلوب",
    "validation.phone_invalid": "رقم الجوال غير صحيح. يجب أن يكون 10 أرقام يبدأ بـ 0 أو 9 أرقام لا يبدأ بـ 0",
    "validation.alt_phone_invalid": "رقم الجوال البديل غير صحيح.",
    "validation.members_required": "يجب إضافة فرد واحد على الأقل",

    # Validation - member
    "validation.member_name_required": "أدخل اسم الفرد",
    "validation.dob_required": "تاريخ الميلاد مطلوب",
    "validation.dob_invalid": "تاريخ الميلاد غير صحيح",
    "validation.nid_required": "رقم الهوية مطلوب",
    "validation.nid_length": "رقم الهوية يجب أن يتكون من 9 أرقام بالضبط",
    "validation.nid_in_family": "رقم الهوية هذا مضاف بالفعل في هذه العائلة!",
    "validation.deceased_husband_required": "يرجى إدخال اسم الزوج المتوفي",
    "validation.death_date_required": "تاريخ وفاة الزوج مطلوب",
    "validation.death_date_invalid": "تاريخ الوفاة غير صحيح",
    "validation.role_description_required": "يرجى إدخال وصف الصفة",
    "validation.guardian_gender_required": "يرجى تحديد جنس الوصي",

    # Duplicates
    "duplicate.nid_in_draft": "انتبه: رقم الهوية هذا موجود في مسودة أخرى محفوظة مسبقاً!",
    "duplicate.nid_remote": "رقم الهوية هذا مسجل مسبقاً في قاعدة البيانات!",
    "duplicate.family_number_exists": "رقم العائلة {family_number} موجود مسبقاً",
    "duplicate.member_nid_exists": "رقم الهوية ({nid}) للمدعو {name} مسجل مسبقاً في النظام",
    "duplicate.family_in_camp": "العائلة رقم {family_number} موجودة مسبقاً في هذا المخيم",
    "duplicate.nid_in_family": "رقم الهوية {nid} ({holder}) موجود مسبقاً في العائلة رقم {holder_number}",
    "duplicate.reactivate_conflict": "لا يمكن إعادة تفعيل العائلة رقم {family_number}: توجد عائلة نشطة بنفس الرقم في هذا المخيم",

    # Connectivity and upload
    "connectivity.offline": "لا يوجد اتصال بالإنترنت",
    "upload.no_drafts": "لا توجد مسودات لهذا المخيم للرفع",
    "upload.summary": "تم رفع {success} عائلة بنجاح",
    "upload.failed": "فشل رفع {failed} عائلة. تحقق من الأخطاء في القائمة.",
    "draft.saved": "تم حفظ المسودة للعائلة رقم {family_number}",
    "family.saved": "تم حفظ العائلة رقم {family_number}",

    # Bulk import
    "import.empty_file": "الملف فارغ أو لا يحتوي على بيانات",
    "import.delegate_issue": "عائلة رقم {family_number}: المفوض \"{delegate}\" غير موجود",
    "import.delegate_abort": "تم العثور على مفوضين غير موجودين في النظام:\n\n{issues}\n\nالرجاء تصحيح أسماء المفوضين أو إضافتهم في صفحة الإعدادات.",
    "import.unrecognized_role": "عائلة رقم {family_number}: الصفة \"{role}\" غير معروفة وتم حفظها كما هي",
    "import.success": "تم استيراد {count} عائلة بنجاح!",
    "import.failed": "فشل استيراد {count} عائلة بسبب تكرار البيانات.",
    "import.notification": "قام {user} باستيراد {count} عائلة جديدة.",

    # Aid
    "aid.bulk_note": "توزيع جماعي",
    "aid.import_note": "استيراد Excel",
    "aid.import_summary": "تم استيراد {count} عملية تسليم.",

    # Notifications
    "notification.new_entry": "قام {user} بإضافة عائلة جديدة (#{family_number}) مع {count} أفراد.",
    "notification.cross_camp": "تنبيه: العائلة رقم {family_number} ({head}) في مخيم {camp} لديها تطابق في أرقام الهوية مع العائلة رقم {other_number} ({other_head}) في مخيم {other_camp}. (عدد الأفراد المتطابقين: {count})",
    "notification.pair_duplicate": "تطابق بيانات: العائلة رقم {family_number} ({head}) في مخيم {camp} لديها تطابق في أرقام الهوية مع العائلة رقم {other_number} ({other_head}) في مخيم {other_camp}. (عدد الأفراد المتطابقين: {count})",

    # Backup
    "backup.invalid": "ملف النسخة الاحتياطية غير صالح",
    "backup.not_confirmed": "يجب تأكيد الاستعادة قبل حذف البيانات الحالية",
    "backup.restore_table_failed": "تعذر استعادة جدول {table}: {error}",

    # Reports
    "report.family_number": "رقم العائلة",
    "report.head_name": "اسم رب العائلة",
    "report.local_mode": "تنبيه: تعذر الاتصال بالذكاء الاصطناعي. تم استخدام المحرك المحلي تلقائياً.",
    "report.sheet_title": "تقرير ذكي",

    # Auth
    "auth.credentials_required": "اسم المستخدم وكلمة المرور مطلوبان",
    "auth.invalid_credentials": "اسم المستخدم أو كلمة المرور غير صحيحة",
}
