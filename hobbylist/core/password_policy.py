import re

# 8 to 64 characters, at least one letter and one digit
_PASSWORD_RE = re.compile(r"(?=.*[A-Za-z])(?=.*\d).{8,64}", re.DOTALL)

class PasswordPolicyError(ValueError):
    pass

def validate_password(password: str) -> None:
    if not _PASSWORD_RE.fullmatch(password or ""):
        raise PasswordPolicyError("WEAK_PASSWORD")
