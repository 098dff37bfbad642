from unittest import TestCase

from ..error import BaseError


class TestBaseError(TestCase):
    def test_message(self):
        assert BaseError("  issuer unreachable \n").message == "issuer unreachable"
        assert BaseError().message == ""

    def test_error_code(self):
        assert BaseError("x", error_code="E1").error_code == "E1"
        assert BaseError("x").error_code is None

    def test_roll_up(self):
        try:
            try:
                raise ValueError("Bad response\n  from vendor")
            except ValueError as err:
                raise BaseError("Unable to issue credential") from err
        except BaseError as err:
            rolled = err.roll_up

        assert rolled == "Unable to issue credential. Bad response. from vendor."

    def test_roll_up_trailing_period(self):
        err = BaseError("Expected proof to be top-level.")
        err.__cause__ = BaseError("Vendor unreachable.")
        assert err.roll_up == "Expected proof to be top-level. Vendor unreachable."
