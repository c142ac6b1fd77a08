from datetime import date

import pytest

from foyer.exceptions import ValidationError
from foyer.schemas import ResidentFilters


class TestResidentFilters:
    def test_empty_and_all_are_not_applied(self):
        filters = ResidentFilters.from_query({"status": "all", "gender": "", "room": "all", "search": "  "})
        assert filters.status is None
        assert filters.gender is None
        assert filters.room is None
        assert filters.search is None

    def test_defaults(self):
        filters = ResidentFilters.from_query({})
        assert filters.sort_by == "created_at"
        assert filters.sort_order == "desc"
        assert filters.selected_terms == (1, 2, 3)

    @pytest.mark.parametrize(
        "session, cycle",
        [("septembre", "sep"), ("sep", "sep"), ("novembre", "nov"), ("fevrier", "fev"), ("février", "fev")],
    )
    def test_session_names(self, session, cycle):
        assert ResidentFilters.from_query({"session": session}).cycle == cycle

    def test_camel_case_parameters(self):
        filters = ResidentFilters.from_query({
            "specificRoom": "A-1",
            "startDate": "2024-09-01",
            "endDate": "2024-12-31",
            "lodgingStatus": "payé",
            "lodgingTerms": "3,1",
            "registrationStatus": "dispensé",
            "sortBy": "lastName",
            "sortOrder": "asc",
        })
        assert filters.specific_room == "A-1"
        assert filters.start_date == date(2024, 9, 1)
        assert filters.end_date == date(2024, 12, 31)
        assert filters.lodging_status == "paid"
        assert filters.lodging_terms == (1, 3)
        assert filters.registration_status == "exempt"
        assert filters.sort_by == "last_name"
        assert filters.sort_order == "asc"

    @pytest.mark.parametrize(
        "value, gender",
        [("garcon", "male"), ("Garçon", "male"), ("homme", "male"), ("fille", "female"), ("femme", "female"), ("female", "female")],
    )
    def test_gender_aliases(self, value, gender):
        assert ResidentFilters.from_query({"gender": value}).gender == gender

    @pytest.mark.parametrize(
        "params",
        [
            {"status": "sleeping"},
            {"room": "balcony"},
            {"gender": "mixte"},
            {"session": "juillet"},
            {"lodgingStatus": "maybe"},
            {"lodgingTerms": "1,4"},
            {"startDate": "not-a-date"},
            {"sortBy": "password"},
            {"year": "24"},
            {"startDate": "2024-12-01", "endDate": "2024-01-01"},
        ],
    )
    def test_invalid_values_raise(self, params):
        with pytest.raises(ValidationError):
            ResidentFilters.from_query(params)
