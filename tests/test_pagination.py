import pytest

from app.core.exceptions import ValidationError
from app.utils.pagination import get_offset, get_pagination_metadata, validate_pagination_params


class TestPagination:

    def test_metadata(self):
        assert get_pagination_metadata(100, 1, 20) == {"page": 1, "limit": 20, "total": 100, "total_pages": 5}

    def test_partial_last_page(self):
        assert get_pagination_metadata(41, 3, 20)["total_pages"] == 3

    def test_no_results(self):
        assert get_pagination_metadata(0, 1, 20)["total_pages"] == 0

    def test_offset(self):
        assert get_offset(1, 20) == 0
        assert get_offset(3, 20) == 40

    @pytest.mark.parametrize("page, limit", [(0, 20), (1, 0), (1, 101)])
    def test_invalid_params(self, page, limit):
        with pytest.raises(ValidationError):
            validate_pagination_params(page, limit)

    def test_custom_max_limit(self):
        validate_pagination_params(1, 500, max_limit=500)
