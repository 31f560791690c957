import pytest

from sage.services.codespace import extract_codespace_url


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (
            "Working in https://fuzzy-space-waddle-5g4xq7.github.dev right now",
            "https://fuzzy-space-waddle-5g4xq7.github.dev",
        ),
        (
            "preview: https://fuzzy-space-waddle-5g4xq7-3000.app.github.dev/login?next=%2F",
            "https://fuzzy-space-waddle-5g4xq7-3000.app.github.dev/login?next=%2F",
        ),
        (
            "[my codespace](https://silver-train-x9.github.dev/) please check",
            "https://silver-train-x9.github.dev/",
        ),
        ("Is https://cuddly-lamp-abc.github.dev.", "https://cuddly-lamp-abc.github.dev"),
    ],
)
def test_extracts_codespace_url(text: str, expected: str) -> None:
    assert extract_codespace_url(text) == expected


def test_first_match_wins() -> None:
    text = "https://first-one.github.dev and https://second-one.github.dev"
    assert extract_codespace_url(text) == "https://first-one.github.dev"


@pytest.mark.parametrize(
    "text",
    [
        "",
        None,
        "no links at all",
        "https://github.com/stakwork/hive/issues/1",
        "http://insecure-space.github.dev",
        "https://github.dev/stakwork/hive",
    ],
)
def test_returns_none_without_codespace_url(text: str | None) -> None:
    assert extract_codespace_url(text) is None
