# -*- coding: utf-8 -*-
"""
Tests for field validation, vocabulary mapping and delegate matching.

Tests cover:
- Phone and national ID rules
- Date part range checks
- Role and shelter label mapping
- Fuzzy delegate matching threshold
"""

from datetime import date

import pytest

from models.individual import Gender, Role
from models.family import ShelterType
from services.matching_service import DelegateMatcher, levenshtein_distance, similarity
from services.translation_manager import tr
from services.validation_service import (
    normalize_nid, validate_date_parts, validate_nid, validate_phone
)
from services.vocab_service import derive_gender, map_role_label, map_shelter_label, parse_yes_no


class TestPhoneValidation:
    """Phone numbers: 10 digits with a leading 0 or 9 without."""

    @pytest.mark.parametrize("phone", ["0599123456", "599123456", "", None, "   "])
    def test_accepted(self, phone):
        assert validate_phone(phone) is True

    @pytest.mark.parametrize("phone", ["059912345", "1599123456", "059912345a", "099912345"])
    def test_rejected(self, phone):
        assert validate_phone(phone) is False

    def test_surrounding_whitespace_ignored(self):
        assert validate_phone(" 0599123456 ") is True

    def test_arabic_indic_digits_rejected(self):
        assert validate_phone("٠٥٩٩١٢٣٤٥٦") is False


class TestNationalIdValidation:

    def test_nine_digits_valid(self):
        assert validate_nid("123456789").is_valid

    def test_missing_is_required_error(self):
        result = validate_nid("")
        assert not result.is_valid
        assert result.first_error == tr("validation.nid_required")

    def test_wrong_length(self):
        result = validate_nid("12345678")
        assert not result.is_valid
        assert result.first_error == tr("validation.nid_length")
        assert result.field == "nid"

    def test_normalize_strips_non_digits(self):
        assert normalize_nid(" 123-456-789 ") == "123456789"
        assert validate_nid("123 456 789").is_valid

    def test_arabic_indic_digits_rejected(self):
        assert normalize_nid("١٢٣٤٥٦٧٨٩") == ""
        result = validate_nid("١٢٣٤٥٦٧٨٩")
        assert not result.is_valid
        assert result.first_error == tr("validation.nid_length")

    def test_mixed_digits_do_not_pass_as_nine(self):
        assert not validate_nid("١٢٣456789").is_valid


class TestDateParts:
    """Day and month are range-checked independently."""

    def test_february_thirtieth_passes(self):
        assert validate_date_parts(30, 2, 2000) is True

    def test_out_of_range(self):
        assert validate_date_parts(32, 1, 2000) is False
        assert validate_date_parts(1, 13, 2000) is False
        assert validate_date_parts(1, 1, 1899) is False

    def test_future_year_rejected(self):
        assert validate_date_parts(1, 1, 2031, today=date(2030, 6, 1)) is False
        assert validate_date_parts(1, 1, 2030, today=date(2030, 6, 1)) is True

    def test_non_numeric(self):
        assert validate_date_parts("a", 1, 2000) is False
        assert validate_date_parts("١", 1, 2000) is False
        assert validate_date_parts(None, 1, 2000) is False


class TestRoleMapping:

    @pytest.mark.parametrize("label,role", [
        ("زوج", Role.HUSBAND),
        ("زوجه", Role.WIFE),
        ("ارمله", Role.WIDOW),
        ("إبنة", Role.DAUGHTER),
        ("  ابن ", Role.SON),
        ("HUSBAND", Role.HUSBAND),
    ])
    def test_recognized(self, label, role):
        match = map_role_label(label)
        assert match.is_recognized
        assert match.role is role
        assert match.stored_value == role.value

    def test_unrecognized_keeps_raw_text(self):
        match = map_role_label(" عم ")
        assert not match.is_recognized
        assert match.role is None
        assert match.stored_value == "عم"

    def test_gender_from_role(self):
        assert derive_gender(Role.DAUGHTER) is Gender.FEMALE
        assert derive_gender(Role.WIDOWER) is Gender.MALE
        assert derive_gender("divorced") is Gender.FEMALE
        assert derive_gender("عم") is Gender.MALE


class TestShelterAndYesNo:

    def test_shelter_labels(self):
        assert map_shelter_label("خيمة جاهزة") == (ShelterType.READY_TENT, None)
        assert map_shelter_label("خيمة مصنعة") == (ShelterType.MANUFACTURED_TENT, None)
        assert map_shelter_label("house") == (ShelterType.HOUSE, None)
        assert map_shelter_label("كرفان") == (ShelterType.OTHER, "كرفان")
        assert map_shelter_label("") == (None, None)

    @pytest.mark.parametrize("value,expected", [
        ("نعم", True), ("Yes", True), (1, True), (1.0, True), (True, True),
        ("لا", False), ("", False), (None, False), (0, False),
    ])
    def test_yes_no(self, value, expected):
        assert parse_yes_no(value) is expected


class TestDelegateMatching:

    def test_levenshtein(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3

    def test_similarity_is_case_insensitive(self):
        assert similarity("Ahmad", "AHMAD") == 1.0

    def test_close_spelling_resolves(self):
        matcher = DelegateMatcher(["محمد أحمد", "خالد يوسف"])
        match = matcher.best_match("محمد احمد")
        assert match.is_resolved
        assert match.name == "محمد أحمد"
        assert match.score >= 0.65

    def test_distant_name_unresolved(self):
        matcher = DelegateMatcher(["abcdefghij"])
        match = matcher.best_match("abcdXXXXXX")
        assert match.score == pytest.approx(0.4)
        assert not match.is_resolved
        assert match.name is None

    def test_threshold_is_inclusive(self):
        # 7 of 10 characters equal -> 0.7
        matcher = DelegateMatcher(["abcdefghij"], threshold=0.7)
        assert matcher.best_match("abcdefgXXX").is_resolved

    def test_no_known_names(self):
        assert not DelegateMatcher([]).best_match("anyone").is_resolved
