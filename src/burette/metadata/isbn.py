# ABOUTME: ISBN-13 value type with checksum validation.
# ABOUTME: Accepts hyphenated input and normalizes to 13 bare digits.

from dataclasses import dataclass

from burette.errors import InvalidIsbnError

_ISBN_LENGTH = 13


@dataclass(frozen=True, order=True)
class Isbn13:
    """A validated 13-digit International Standard Book Number.

    The last digit is a check digit: weighting the digits 1, 3, 1, 3, ...
    the weighted sum of all 13 digits must be divisible by 10. Hyphens are
    accepted anywhere on input since the grouping of real ISBNs varies by
    publisher; the canonical form is the bare digits.
    """

    digits: str

    @classmethod
    def parse(cls, text: str) -> "Isbn13":
        """Parse and validate an ISBN-13.

        Raises:
            InvalidIsbnError: If the text contains characters other than
                digits and hyphens, has the wrong number of digits, or
                fails the checksum.
        """
        digits: list[str] = []
        checksum = 0
        for char in text:
            if char == "-":
                continue
            if not ("0" <= char <= "9"):
                raise InvalidIsbnError(f"Invalid character in ISBN-13: '{char}'")
            if len(digits) == _ISBN_LENGTH:
                raise InvalidIsbnError("ISBN-13 is too long")
            value = int(char)
            checksum += value if len(digits) % 2 == 0 else value * 3
            digits.append(char)

        if len(digits) != _ISBN_LENGTH:
            raise InvalidIsbnError("ISBN-13 is too short")
        if checksum % 10 != 0:
            raise InvalidIsbnError("Invalid ISBN-13 checksum")

        return cls("".join(digits))

    @classmethod
    def try_parse(cls, text: str) -> "Isbn13 | None":
        """Parse an ISBN-13, returning None instead of raising."""
        try:
            return cls.parse(text)
        except InvalidIsbnError:
            return None

    def __str__(self) -> str:
        return self.digits
