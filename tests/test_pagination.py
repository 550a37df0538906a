from movie_reviews import pagination
from movie_reviews.config import PaginationConfig

CFG = PaginationConfig(default_size=25, max_size=100)


def test_defaults_when_missing():
    assert pagination.set_defaults(None, None, CFG) == (1, 25)


def test_invalid_values_are_corrected():
    assert pagination.set_defaults(0, 0, CFG) == (1, 25)
    assert pagination.set_defaults(-3, -1, CFG) == (1, 25)


def test_size_is_capped():
    assert pagination.set_defaults(2, 500, CFG) == (2, 100)


def test_offset_limit():
    assert pagination.offset_limit(1, 25) == (0, 25)
    assert pagination.offset_limit(3, 10) == (20, 10)


def test_response_shape():
    assert pagination.response(2, 10, 31, ["a"]) == {"page": 2, "size": 10, "total": 31, "items": ["a"]}
