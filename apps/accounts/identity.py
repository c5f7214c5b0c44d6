from dataclasses import dataclass


@dataclass(frozen=True)
class VerifiedIdentity:
    """The authenticated caller as vouched for by the identity provider."""

    user_id: object
    email: str

    @classmethod
    def from_user(cls, user):
        return cls(user_id=user.pk, email=user.email)

    def matches_email(self, email):
        return bool(email) and self.email.strip().lower() == email.strip().lower()
