"""Professional Role Catalog — catalog shape and selection size rule."""

from cresp.core.professional_role_catalog import (
    COMPLEMENTARY_ROLES, PROFESSIONAL_ROLE_KEYS, PROFESSIONAL_ROLES,
    check_role_selection, complementary_roles,
)


def test_catalog_shape():
    assert len(PROFESSIONAL_ROLES) == 20
    assert set(COMPLEMENTARY_ROLES) == PROFESSIONAL_ROLE_KEYS
    assert complementary_roles("director") == [
        "cinematographer", "producer", "screenplay_writer", "actor",
    ]
    assert complementary_roles("unknown") == []


def test_role_selection_size():
    message = "Invalid professional role selection. Please select 1-3 roles."
    assert check_role_selection([]) == message
    assert check_role_selection(["a", "b", "c", "d"]) == message
    assert check_role_selection(["a", "a", "b"]) is None
