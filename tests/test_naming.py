import pytest

from wirefront.naming import matches_prefixed, normalize, spellings, to_camel, to_snake, to_studly


@pytest.mark.parametrize("name", ["display_name", "displayName", "DisplayName", "DISPLAY_NAME"])
def test_normalize_folds_case_and_underscores(name: str) -> None:
    assert normalize(name) == "displayname"


@pytest.mark.parametrize(
    ("name", "snake"),
    [
        ("display_name", "display_name"),
        ("displayName", "display_name"),
        ("DisplayName", "display_name"),
        ("URLPath", "url_path"),
        ("_private_", "private"),
    ],
)
def test_to_snake(name: str, snake: str) -> None:
    assert to_snake(name) == snake


def test_camel_and_studly() -> None:
    assert to_camel("display_name") == "displayName"
    assert to_studly("display_name") == "DisplayName"
    assert to_camel("title") == "title"


def test_spellings_without_prefix_keep_written_name_first() -> None:
    assert spellings("displayName") == ("displayName", "display_name")
    assert spellings("title") == ("title",)


def test_spellings_with_prefix() -> None:
    assert spellings("display_name", "get") == ("get_display_name", "getDisplayName")
    assert spellings("published", "is") == ("is_published", "isPublished")


def test_matches_prefixed_requires_word_boundary() -> None:
    assert matches_prefixed("get_title", "get")
    assert matches_prefixed("getTitle", "get")
    assert not matches_prefixed("gettitle", "get")
    assert not matches_prefixed("issue", "is")
    assert not matches_prefixed("is", "is")
    assert matches_prefixed("anything", "")
