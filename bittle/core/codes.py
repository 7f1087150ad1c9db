import secrets
import string
from typing import Iterable

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


def normalize_code(code: str) -> str:
    """Form codes are entered by hand; compare them uppercased and trimmed."""
    return (code or "").strip().upper()


def generate_form_code(existing: Iterable[str], length: int = CODE_LENGTH) -> str:
    taken = {normalize_code(c) for c in existing}
    while True:
        code = "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))
        if code not in taken:
            return code
