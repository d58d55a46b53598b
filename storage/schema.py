"""
PageDB Row Layout
=================
The single fixed schema: users(id, username, email).

Every row occupies exactly ROW_SIZE bytes. Fields are packed contiguously,
in column order, with no alignment padding:

    offset  size  field
    ------  ----  -----------------------------------------
         0     4  id        uint32, little-endian
         4    33  username  up to 32 bytes UTF-8 + NUL
        37   256  email     up to 255 bytes UTF-8 + NUL

There is no header and no version tag on disk, so these numbers ARE the
file format. Changing any of them makes existing data files unreadable.
"""

from dataclasses import dataclass

# ─── Column capacities (characters the user may supply, in bytes) ───────────

COLUMN_USERNAME_SIZE = 32
COLUMN_EMAIL_SIZE = 255

ID_MAX = 0xFFFFFFFF

# ─── Slot sizes (capacity + terminator) and offsets ─────────────────────────

ID_SIZE = 4
USERNAME_SIZE = COLUMN_USERNAME_SIZE + 1
EMAIL_SIZE = COLUMN_EMAIL_SIZE + 1

ID_OFFSET = 0
USERNAME_OFFSET = ID_OFFSET + ID_SIZE
EMAIL_OFFSET = USERNAME_OFFSET + USERNAME_SIZE

ROW_SIZE = ID_SIZE + USERNAME_SIZE + EMAIL_SIZE

TEXT_ENCODING = "utf-8"


@dataclass(frozen=True)
class Row:
    """One record. Immutable once built; the table never updates rows."""
    id: int
    username: str
    email: str

    def validate(self) -> list[str]:
        """
        Check the row against the column capacities.
        Returns a list of error messages (empty = valid).
        """
        errors: list[str] = []
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            errors.append(f"id must be an integer, got {type(self.id).__name__}")
        elif self.id < 0:
            errors.append(f"id must be non-negative, got {self.id}")
        elif self.id > ID_MAX:
            errors.append(f"id exceeds 32-bit range: {self.id}")

        for name, value, limit in (("username", self.username, COLUMN_USERNAME_SIZE),
                                   ("email", self.email, COLUMN_EMAIL_SIZE)):
            if not isinstance(value, str):
                errors.append(f"{name} must be a string, got {type(value).__name__}")
                continue
            encoded = value.encode(TEXT_ENCODING)
            if len(encoded) > limit:
                errors.append(f"{name} is {len(encoded)} bytes, max {limit}")
            elif b"\x00" in encoded:
                errors.append(f"{name} must not contain NUL bytes")
        return errors

    def __str__(self) -> str:
        return f"({self.id}, {self.username}, {self.email})"
