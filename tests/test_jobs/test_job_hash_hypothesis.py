"""Property-based tests for validator job identity."""

from __future__ import annotations

import string
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from integrity.jobs.object_validator import validator_job_hash
from integrity.schemas.job import LocationData, ObjectValidatorJobInit

PROPERTY_SETTINGS = settings(max_examples=200, deadline=None)

_SEGMENT = st.text(alphabet=string.ascii_lowercase + string.digits, min_size=1, max_size=8)
_SUB_PATH = st.builds(lambda parts: "/".join(parts), st.lists(_SEGMENT, min_size=1, max_size=3))


def _init(location_id: int, sub_path: str | None, **location_fields: str) -> ObjectValidatorJobInit:
    return ObjectValidatorJobInit(
        location=LocationData(id=location_id, pub_id="pub", **location_fields),
        sub_path=Path(sub_path) if sub_path is not None else None,
    )


class TestValidatorJobHashProperties:
    @PROPERTY_SETTINGS
    @given(location_id=st.integers(min_value=1, max_value=10_000), sub_path=_SUB_PATH)
    def test_hash_ignores_non_identity_location_fields(
        self, location_id: int, sub_path: str
    ) -> None:
        plain = _init(location_id, sub_path)
        decorated = _init(location_id, sub_path, name="Photos", path="/srv/photos")
        assert validator_job_hash(plain) == validator_job_hash(decorated)

    @PROPERTY_SETTINGS
    @given(location_id=st.integers(min_value=1, max_value=10_000))
    def test_root_sub_paths_hash_like_no_sub_path(self, location_id: int) -> None:
        expected = validator_job_hash(_init(location_id, None))
        assert validator_job_hash(_init(location_id, "")) == expected
        assert validator_job_hash(_init(location_id, "/")) == expected

    @PROPERTY_SETTINGS
    @given(
        location_id=st.integers(min_value=1, max_value=10_000),
        first=_SUB_PATH,
        second=_SUB_PATH,
    )
    def test_distinct_scopes_hash_differently(
        self, location_id: int, first: str, second: str
    ) -> None:
        same = first == second
        assert (
            validator_job_hash(_init(location_id, first))
            == validator_job_hash(_init(location_id, second))
        ) is same

    @PROPERTY_SETTINGS
    @given(
        first=st.integers(min_value=1, max_value=10_000),
        second=st.integers(min_value=1, max_value=10_000),
    )
    def test_locations_hash_differently(self, first: int, second: int) -> None:
        same = first == second
        assert (
            validator_job_hash(_init(first, "dir")) == validator_job_hash(_init(second, "dir"))
        ) is same


class TestValidatorJobHashSpellings:
    @pytest.mark.parametrize("spelling", ["/dir", "dir/./", "dir/", "/srv/photos/dir"])
    def test_equivalent_spellings_hash_alike(self, spelling: str) -> None:
        expected = validator_job_hash(_init(1, "dir", path="/srv/photos"))
        assert validator_job_hash(_init(1, spelling, path="/srv/photos")) == expected

    def test_location_root_as_absolute_sub_path(self) -> None:
        expected = validator_job_hash(_init(1, None, path="/srv/photos"))
        assert validator_job_hash(_init(1, "/srv/photos", path="/srv/photos")) == expected
