# -*- coding: utf-8 -*-
"""
Family/Member Assembler.

Turns raw form input into a normalized FamilyBundle. Rules are checked in
a fixed order and the first violation is reported:

1. family number and address present
2. contact and alternative phone well-formed when given
3. at least one member
4. per member: name, date of birth, national ID (format and uniqueness
   inside the bundle), widow fields, "other" description, guardian gender

Form input is a plain dict using the Family/Individual field names. Dates
may be given as ISO strings ("dob") or as parts ("dob_day", "dob_month",
"dob_year"); the widow's death date likewise ("husband_death_date" or
"death_day"/"death_month"/"death_year").
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from models.family import Family, FamilyBundle, ShelterType
from models.individual import Gender, Individual, Role
from services.exceptions import ValidationError
from services.translation_manager import tr
from services.validation_service import (
    ValidationResult, is_blank, normalize_nid, validate_date_parts, validate_nid,
    validate_phone,
)
from services.vocab_service import derive_gender, map_role_label
from utils.datetime_utils import compose_date, split_date
from utils.helpers import digits_only
from utils.logger import get_logger

logger = get_logger(__name__)

MemberInput = Union[Dict[str, Any], Individual]


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _date_parts(form: Dict[str, Any], iso_key: str, prefix: str):
    """(day, month, year) from either the part fields or the ISO field."""
    parts = (form.get(f"{prefix}_day"), form.get(f"{prefix}_month"), form.get(f"{prefix}_year"))
    if any(not is_blank(p) for p in parts):
        return tuple(_text(p) for p in parts)
    return split_date(_text(form.get(iso_key)))


def _has_date(parts) -> bool:
    return all(p for p in parts)


def _as_form(member: MemberInput) -> Dict[str, Any]:
    return member.to_dict() if isinstance(member, Individual) else dict(member)


def assemble_member(form: MemberInput,
                    existing_members: Sequence[MemberInput] = (),
                    editing_index: Optional[int] = None) -> Individual:
    """
    Validate and normalize one member row.

    existing_members is the in-progress member list; the row at
    editing_index (the one being edited) is ignored for the duplicate check.
    """
    form = _as_form(form)

    name = _text(form.get("name"))
    if not name:
        raise ValidationError(tr("validation.member_name_required"), field="name")

    dob_parts = _date_parts(form, "dob", "dob")
    if not _has_date(dob_parts):
        raise ValidationError(tr("validation.dob_required"), field="dob")
    if not validate_date_parts(*dob_parts):
        raise ValidationError(tr("validation.dob_invalid"), field="dob")

    nid_check = validate_nid(form.get("nid"))
    if not nid_check.is_valid:
        raise ValidationError(nid_check.first_error, field="nid")
    nid = normalize_nid(form.get("nid"))
    for index, other in enumerate(existing_members):
        if index == editing_index:
            continue
        if normalize_nid(_as_form(other).get("nid")) == nid:
            raise ValidationError(tr("validation.nid_in_family"), field="nid")

    role_match = map_role_label(form.get("role") or Role.OTHER.value)
    role = role_match.role

    deceased_husband_name = None
    husband_death_date = None
    if role is Role.WIDOW:
        deceased_husband_name = _text(form.get("deceased_husband_name"))
        if not deceased_husband_name:
            raise ValidationError(tr("validation.deceased_husband_required"),
                                  field="deceased_husband_name")
        death_parts = _date_parts(form, "husband_death_date", "death")
        if not _has_date(death_parts):
            raise ValidationError(tr("validation.death_date_required"), field="husband_death_date")
        if not validate_date_parts(*death_parts):
            raise ValidationError(tr("validation.death_date_invalid"), field="husband_death_date")
        husband_death_date = compose_date(*death_parts)

    role_description = None
    if role is Role.OTHER:
        role_description = _text(form.get("role_description"))
        if not role_description:
            raise ValidationError(tr("validation.role_description_required"),
                                  field="role_description")

    if role is Role.GUARDIAN:
        gender = _text(form.get("gender")).lower()
        if gender not in (Gender.MALE.value, Gender.FEMALE.value):
            raise ValidationError(tr("validation.guardian_gender_required"), field="gender")
    else:
        gender = derive_gender(role).value

    return Individual(
        individual_id=form.get("individual_id"),
        family_id=form.get("family_id"),
        name=name,
        nid=nid,
        dob=compose_date(*dob_parts),
        gender=gender,
        role=role_match.stored_value,
        role_description=role_description,
        deceased_husband_name=deceased_husband_name,
        husband_death_date=husband_death_date,
        shoe_size=_optional_text(form.get("shoe_size")),
        clothes_size=_optional_text(form.get("clothes_size")),
        is_pregnant=bool(form.get("is_pregnant")),
        is_nursing=bool(form.get("is_nursing")),
        notes=_optional_text(form.get("notes")),
    )


def assemble_family(form: Dict[str, Any], camp_id: Optional[str] = None) -> Family:
    """Family-level rules (1 and 2) without looking at members."""
    family_number = _text(form.get("family_number"))
    if not family_number:
        raise ValidationError(tr("validation.family_number_required"), field="family_number")

    address = _text(form.get("address"))
    if not address:
        raise ValidationError(tr("validation.address_required"), field="address")

    contact = _text(form.get("contact"))
    if not validate_phone(contact):
        raise ValidationError(tr("validation.phone_invalid"), field="contact")

    alternative = _text(form.get("alternative_mobile"))
    if not validate_phone(alternative):
        raise ValidationError(tr("validation.alt_phone_invalid"), field="alternative_mobile")

    shelter_type = _optional_text(form.get("shelter_type"))
    shelter_other = None
    if shelter_type == ShelterType.OTHER.value:
        shelter_other = _optional_text(form.get("shelter_type_other"))

    return Family(
        family_id=form.get("family_id"),
        family_number=family_number,
        camp_id=camp_id or form.get("camp_id"),
        address=address,
        contact=digits_only(contact) or None,
        alternative_mobile=digits_only(alternative) or None,
        housing_status=_optional_text(form.get("housing_status")),
        family_needs=_optional_text(form.get("family_needs")),
        shelter_type=shelter_type,
        shelter_type_other=shelter_other,
        delegate=_optional_text(form.get("delegate")),
        is_departed=bool(form.get("is_departed", False)),
    )


def assemble(form: Dict[str, Any], camp_id: Optional[str] = None) -> FamilyBundle:
    """
    Validate and normalize a whole family form.

    Raises:
        ValidationError: for the first violated rule; member_index is set
            when the violation belongs to a member row.
    """
    family = assemble_family(form, camp_id)

    raw_members: List[MemberInput] = list(form.get("members") or [])
    if not raw_members:
        raise ValidationError(tr("validation.members_required"), field="members")

    members: List[Individual] = []
    for index, raw in enumerate(raw_members):
        try:
            members.append(assemble_member(raw, members))
        except ValidationError as e:
            e.member_index = index
            raise

    return FamilyBundle(family=family, members=members)


def validate(form: Dict[str, Any], camp_id: Optional[str] = None) -> ValidationResult:
    """Same rules as assemble(), returned as a value for field highlighting."""
    try:
        assemble(form, camp_id)
    except ValidationError as e:
        return ValidationResult(is_valid=False, errors=list(e.errors), field=e.field)
    return ValidationResult.ok()
