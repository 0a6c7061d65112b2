import pytest

from halolight.auth.permissions import has_permission, parse_permission, permission_matches


@pytest.mark.parametrize(
    "granted, required",
    [
        ("documents:read", "documents:read"),
        ("documents:*", "documents:delete"),
        ("*:read", "users:read"),
        ("*:*", "teams:update"),
    ],
)
def test_permission_matches(granted, required):
    assert permission_matches(granted, required)


@pytest.mark.parametrize(
    "granted, required",
    [
        ("documents:read", "documents:write"),
        ("documents:*", "users:read"),
        ("*:read", "users:delete"),
        ("documents", "documents:read"),
        ("", "documents:read"),
    ],
)
def test_permission_does_not_match(granted, required):
    assert not permission_matches(granted, required)


def test_parse_permission_rejects_malformed_values():
    assert parse_permission("users:read") == ("users", "read")
    assert parse_permission("users") == (None, None)
    assert parse_permission("a:b:c") == (None, None)
    assert parse_permission(":read") == (None, None)


def test_has_permission_uses_union_of_grants():
    granted = ["users:read", "documents:*"]
    assert has_permission(granted, "documents", "share")
    assert has_permission(granted, "users", "read")
    assert not has_permission(granted, "users", "delete")
    assert not has_permission([], "users", "read")
