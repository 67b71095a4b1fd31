# -*- coding: utf-8 -*-
"""English translations."""

EN_TRANSLATIONS = {
    # Common
    "common.yes": "Yes",
    "common.no": "No",
    "common.unknown": "Unknown",
    "common.system": "System",
    "common.no_members": "No registered members",
    "common.unassigned": "Unassigned",

    # Validation - family
    "validation.camp_required": "Please select a camp first",
    "validation.family_number_required": "Family number is required",
    "validation.address_required": "Address is required",
    "validation.phone_invalid": "Invalid phone number. Use 10 digits starting with 0 or 9 digits not starting with 0",
    "validation.alt_phone_invalid": "Invalid alternative phone number.",
    "validation.members_required": "At least one member is required",

    # Validation - member
    "validation.member_name_required": "Member name is required",
    "validation.dob_required": "Date of birth is required",
    "validation.dob_invalid": "Invalid date of birth",
    "validation.nid_required": "National ID is required",
    "validation.nid_length": "National ID must be exactly 9 digits",
    "validation.nid_in_family": "This national ID is already in this family!",
    "validation.deceased_husband_required": "Deceased husband's name is required",
    "validation.death_date_required": "Husband's date of death is required",
    "validation.death_date_invalid": "Invalid date of death",
    "validation.role_description_required": "Role description is required",
    "validation.guardian_gender_required": "Guardian gender must be chosen",

    # Duplicates
    "duplicate.nid_in_draft": "This national ID already exists in another saved draft!",
    "duplicate.nid_remote": "This national ID is already registered!",
    "duplicate.family_number_exists": "Family number {family_number} already exists",
    "duplicate.member_nid_exists": "National ID ({nid}) of {name} is already registered",
    "duplicate.family_in_camp": "Family number {family_number} already exists in this camp",
    "duplicate.nid_in_family": "National ID {nid} ({holder}) already exists in family number {holder_number}",
    "duplicate.reactivate_conflict": "Cannot reactivate family number {family_number}: an active family with this number exists in this camp",

    # Connectivity and upload
    "connectivity.offline": "No internet connection",
    "upload.no_drafts": "No drafts to upload for this camp",
    "upload.summary": "Uploaded {success} families successfully",
    "upload.failed": "Failed to upload {failed} families. Check the errors in the list.",
    "draft.saved": "Draft saved for family number {family_number}",
    "family.saved": "Family number {family_number} saved",

    # Bulk import
    "import.empty_file": "The file is empty or has no data rows",
    "import.delegate_issue": "Family {family_number}: delegate \"{delegate}\" not found",
    "import.delegate_abort": "Unknown delegates found:\n\n{issues}\n\nFix the delegate names or add them in settings.",
    "import.unrecognized_role": "Family {family_number}: role \"{role}\" not recognized, stored as-is",
    "import.success": "Imported {count} families successfully!",
    "import.failed": "Failed to import {count} families due to duplicate data.",
    "import.notification": "{user} imported {count} new families.",

    # Aid
    "aid.bulk_note": "Bulk distribution",
    "aid.import_note": "Excel import",
    "aid.import_summary": "Imported {count} deliveries.",

    # Notifications
    "notification.new_entry": "{user} added a new family (#{family_number}) with {count} members.",
    "notification.cross_camp": "Alert: family {family_number} ({head}) in camp {camp} shares national IDs with family {other_number} ({other_head}) in camp {other_camp}. (matching members: {count})",
    "notification.pair_duplicate": "Data match: family {family_number} ({head}) in camp {camp} shares national IDs with family {other_number} ({other_head}) in camp {other_camp}. (matching members: {count})",

    # Backup
    "backup.invalid": "Invalid backup file",
    "backup.not_confirmed": "Restore must be confirmed before existing data is deleted",
    "backup.restore_table_failed": "Could not restore table {table}: {error}",

    # Reports
    "report.family_number": "Family number",
    "report.head_name": "Head of family",
    "report.local_mode": "Notice: the AI bridge is unreachable. The local engine was used.",
    "report.sheet_title": "Smart report",

    # Auth
    "auth.credentials_required": "Username and password are required",
    "auth.invalid_credentials": "Invalid username or password",
}
