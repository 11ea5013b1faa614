"""
Unit tests for registration ID generation.
"""

from admit_portal.modules.applications.helpers import (
    RegistrationIdGenerator,
    is_registration_id,
)


class TestRegistrationIdGenerator:
    """Tests for RegistrationIdGenerator."""

    def test_format_is_prefix_plus_milliseconds(self):
        generate = RegistrationIdGenerator(clock=lambda: 1700000000.5)

        assert generate() == "GOV1700000000500"

    def test_custom_prefix(self):
        generate = RegistrationIdGenerator("REG", clock=lambda: 1.0)

        assert generate() == "REG1000"

    def test_same_millisecond_still_unique(self):
        generate = RegistrationIdGenerator(clock=lambda: 1700000000.0)

        ids = [generate() for _ in range(100)]

        assert len(set(ids)) == 100
        assert ids[1] == "GOV1700000000001"

    def test_strictly_increasing_when_clock_steps_back(self):
        times = iter([1700000000.500, 1700000000.100, 1700000001.000])
        generate = RegistrationIdGenerator(clock=lambda: next(times))

        first, second, third = generate(), generate(), generate()

        assert int(first[3:]) < int(second[3:]) < int(third[3:])
        assert second == "GOV1700000000501"

    def test_real_clock_ids_are_well_formed(self):
        generate = RegistrationIdGenerator()

        assert is_registration_id(generate())


class TestIsRegistrationId:
    """Tests for is_registration_id."""

    def test_valid(self):
        assert is_registration_id("GOV1700000000000")

    def test_invalid(self):
        assert not is_registration_id("GOV")
        assert not is_registration_id("gov123")
        assert not is_registration_id("GOV12a")
        assert not is_registration_id("XYZ123")
        # Arabic-Indic digits
        assert not is_registration_id("GOV\u0661\u0662\u0663")
