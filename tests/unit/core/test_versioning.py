import pytest

from modfleet.core.versioning import is_version_tag, next_patch_version


@pytest.mark.parametrize(
    ("latest", "expected"),
    [
        (None, "v0.0.1"),
        ("v1.4.9", "v1.4.10"),
        ("v0.0.0", "v0.0.1"),
        ("2.3.4", "2.3.5"),
        ("v1.2.3-rc1", "v1.2.3"),
        ("v1.2.3+build.7", "v1.2.4"),
    ],
)
def test_next_patch_version(latest: str | None, expected: str) -> None:
    assert next_patch_version(latest) == expected


def test_next_patch_version_rejects_non_semantic_tag() -> None:
    with pytest.raises(ValueError, match="non-semantic"):
        next_patch_version("release-2024")


def test_is_version_tag() -> None:
    assert is_version_tag("v1.0.0")
    assert is_version_tag("1.0.0-beta")
    assert not is_version_tag("v1.0")
    assert not is_version_tag("latest")
