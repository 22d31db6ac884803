# hobbylist/models/__init__.py

from hobbylist.models.user import User  # noqa: F401
from hobbylist.models.verification_token import TokenPurpose, VerificationToken  # noqa: F401
