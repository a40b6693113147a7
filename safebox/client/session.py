from dataclasses import dataclass


class NotAuthenticatedError(RuntimeError):
    pass


@dataclass
class UserSession:
    """
    Client-held sign-in state. Set when the user signs in, cleared on
    sign-out, and read by every protected API call.
    """
    email: str | None = None
    user_id: int | None = None
    name: str | None = None
    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def login(self, user_id: int, email: str, name: str | None = None, token: str | None = None) -> None:
        self.user_id = user_id
        self.email = email
        self.name = name
        self.token = token

    def clear(self) -> None:
        self.email = None
        self.user_id = None
        self.name = None
        self.token = None

    def headers(self) -> dict[str, str]:
        if not self.is_authenticated:
            raise NotAuthenticatedError("Sign in before calling protected endpoints")
        return {"x-user-id": str(self.user_id)}
