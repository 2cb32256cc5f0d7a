"""Unit tests for registration validation utilities."""
import pytest
from datetime import date, datetime, timedelta, timezone

from src.models.registrant import Person, RegistrationInput
from src.utils.strict_validators import validate_name_strict, validate_postal_code_strict
from src.utils.validation import (
    ERROR_MESSAGES,
    check,
    try_calculate_age,
    validate_age,
    validate_city,
    validate_email,
    validate_family_name,
    validate_given_name,
    validate_postal_code,
    validate_registration,
)

NON_STRINGS = [None, 0, 75001, 3.14, [], ["Dupont"], {}, {"nom": "Dupont"}, True]
FIELD_VALIDATORS = [
    validate_email,
    validate_postal_code,
    validate_family_name,
    validate_given_name,
    validate_city,
    validate_age,
]


def _years_ago(years: int) -> str:
    today = date.today()
    try:
        return today.replace(year=today.year - years).isoformat()
    except ValueError:
        # 29 February on a non-leap target year
        return today.replace(year=today.year - years, day=28).isoformat()


@pytest.fixture
def valid_form():
    """A form that passes every check."""
    return {
        "family_name": "Dupont",
        "given_name": "Jean",
        "email": "jean@example.com",
        "birth_date": _years_ago(20),
        "city": "Paris",
        "postal_code": "75001",
    }


class TestNonStringInput:
    """Every field validator rejects non-string input without raising."""

    @pytest.mark.parametrize("validator", FIELD_VALIDATORS)
    @pytest.mark.parametrize("value", NON_STRINGS)
    def test_non_string_returns_false(self, validator, value):
        assert validator(value) is False


class TestValidateEmail:
    """Test email shape validation."""

    @pytest.mark.parametrize("email", [
        "jean@example.com",
        "jean.dupont+test@mail.example.fr",
        "a@b.c",
    ])
    def test_valid_emails(self, email):
        assert validate_email(email) is True

    @pytest.mark.parametrize("email", [
        "",
        "jean",
        "jean@example",
        "@example.com",
        "jean@.com",
        "jean dupont@example.com",
        "jean@exa mple.com",
        "jean@@example.com",
        "jean@example.com ",
    ])
    def test_invalid_emails(self, email):
        assert validate_email(email) is False


class TestValidatePostalCode:
    """Test French postal code validation."""

    def test_five_digits(self):
        assert validate_postal_code("75001") is True

    def test_leading_zero(self):
        assert validate_postal_code("01000") is True

    @pytest.mark.parametrize("code", ["7500", "750011", "750A1", "", " 75001", "75001\n", "７５００１", "٧٥٠٠١"])
    def test_invalid_codes(self, code):
        assert validate_postal_code(code) is False


class TestValidateNames:
    """Test family and given name validation (strict policy)."""

    @pytest.mark.parametrize("validator", [validate_family_name, validate_given_name])
    @pytest.mark.parametrize("name", ["Dupont", "Éloïse", "Jean-Luc", "  Marie Claire  ", "Žofie", "李"])
    def test_valid_names(self, validator, name):
        assert validator(name) is True

    @pytest.mark.parametrize("validator", [validate_family_name, validate_given_name])
    @pytest.mark.parametrize("name", ["Dupont2", "1", "J3an", "Jean ٣", "Louis XIV 14"])
    def test_names_with_digits_rejected(self, validator, name):
        assert validator(name) is False

    @pytest.mark.parametrize("validator", [validate_family_name, validate_given_name])
    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_blank_names_rejected(self, validator, name):
        assert validator(name) is False

    @pytest.mark.parametrize("validator", [validate_family_name, validate_given_name])
    @pytest.mark.parametrize("name", ["<script>", "Jean<b>", "a>b", "O'Brien", "Dupont."])
    def test_markup_and_punctuation_rejected(self, validator, name):
        assert validator(name) is False


class TestValidateCity:
    """Test city validation."""

    def test_valid_city(self):
        assert validate_city("Paris") is True

    def test_whitespace_only_city(self):
        assert validate_city("   ") is False

    def test_empty_city(self):
        assert validate_city("") is False


class TestValidateAge:
    """Test adult age check from a birth date string."""

    def test_one_day_short_of_eighteen(self):
        assert validate_age("2006-06-16", today=date(2024, 6, 15)) is False

    def test_eighteenth_birthday_today(self):
        assert validate_age("2006-06-15", today=date(2024, 6, 15)) is True

    def test_one_day_past_eighteen(self):
        assert validate_age("2006-06-14", today=date(2024, 6, 15)) is True

    def test_earlier_month_not_yet_reached(self):
        assert validate_age("2006-07-01", today=date(2024, 6, 15)) is False

    def test_leap_day_birth_on_non_leap_year(self):
        assert validate_age("2004-02-29", today=date(2022, 2, 28)) is False
        assert validate_age("2004-02-29", today=date(2022, 3, 1)) is True

    def test_future_date(self):
        future = date.today() + timedelta(days=366)
        assert validate_age(future.isoformat()) is False

    def test_twenty_years_ago(self):
        assert validate_age(_years_ago(20)) is True

    @pytest.mark.parametrize("value", ["", "not-a-date", "2006-13-01", "2006-02-30", "15/06/2006"])
    def test_malformed_dates(self, value):
        assert validate_age(value) is False


class TestValidateRegistration:
    """Test composite validation of a whole form."""

    def test_valid_form_has_no_errors(self, valid_form):
        assert validate_registration(valid_form) == {}

    def test_all_empty_fields_yield_six_errors(self):
        form = {name: "" for name in RegistrationInput().to_dict()}
        errors = validate_registration(form)

        assert len(errors) == 6
        assert errors["birth_date"] == ERROR_MESSAGES["birth_date_missing"]

    def test_absent_input_returns_empty_mapping(self):
        assert validate_registration(None) == {}
        assert validate_registration({}) == {}

    def test_every_failure_reported(self, valid_form):
        valid_form["family_name"] = "Dupont2"
        valid_form["postal_code"] = "750"

        errors = validate_registration(valid_form)

        assert set(errors) == {"family_name", "postal_code"}
        assert errors["postal_code"] == "Code postal invalide (5 chiffres)"

    def test_under_age_message(self, valid_form):
        errors = validate_registration(
            dict(valid_form, birth_date="2006-06-16"),
            today=date(2024, 6, 15),
        )
        assert errors == {"birth_date": "Vous devez avoir au moins 18 ans"}

    def test_missing_keys_are_errors(self):
        errors = validate_registration({"family_name": "Dupont"})
        assert set(errors) == {"given_name", "email", "birth_date", "city", "postal_code"}

    def test_accepts_registration_input(self, valid_form):
        assert validate_registration(RegistrationInput(**valid_form)) == {}

    def test_accepts_french_form_keys(self):
        form = {
            "nom": "Dupont",
            "prenom": "Jean",
            "email": "jean@example.com",
            "dateNaissance": _years_ago(30),
            "ville": "Paris",
            "codePostal": "75001",
        }
        assert validate_registration(form) == {}

    def test_composite_and_field_validity_agree(self, valid_form):
        assert validate_registration(valid_form) == {}
        assert validate_family_name(valid_form["family_name"])
        assert validate_given_name(valid_form["given_name"])
        assert validate_email(valid_form["email"])
        assert validate_age(valid_form["birth_date"])
        assert validate_city(valid_form["city"])
        assert validate_postal_code(valid_form["postal_code"])

    @pytest.mark.parametrize("field_name, bad_value", [
        ("family_name", "<b>"),
        ("given_name", "J3an"),
        ("email", "jean@"),
        ("birth_date", "2999-01-01"),
        ("city", " "),
        ("postal_code", "ABCDE"),
    ])
    def test_single_bad_field_reported_alone(self, valid_form, field_name, bad_value):
        valid_form[field_name] = bad_value
        assert list(validate_registration(valid_form)) == [field_name]


class TestPolicyAdapters:
    """Test conversion from the throwing to the collecting policy."""

    def test_check_valid(self):
        assert check(validate_postal_code_strict, "75001") == (True, "")

    def test_check_invalid(self):
        assert check(validate_postal_code_strict, "7500") == (False, "")

    def test_check_converts_missing_parameter(self):
        assert check(validate_name_strict, None) == (False, "missing parameter")

    def test_try_calculate_age_success(self):
        assert try_calculate_age(Person(birth=date(2006, 6, 14)), date(2024, 6, 15)) == (18, "")

    def test_try_calculate_age_missing_birth(self):
        assert try_calculate_age(Person()) == (None, "missing birth")

    def test_try_calculate_age_mixed_timezones(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert try_calculate_age({"birth": datetime(2000, 1, 1)}, now) == (24, "")

    def test_try_calculate_age_future_mixed_timezones(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert try_calculate_age({"birth": datetime(2025, 1, 1)}, now) == (None, "birth date is in the future")

    def test_try_calculate_age_missing_person(self):
        assert try_calculate_age(None) == (None, "missing parameter")
