"""Fallback chains for fields that can come from several sources."""

from typing import Callable, Iterable, Optional, Sequence, TypeVar

from ..protocol.models import AUTO_IP_ADDRESS, User
from .parsers import parse_ip_address, split_key_value

T = TypeVar("T")


def first_present(*suppliers: Callable[[], Optional[T]]) -> Optional[T]:
    """
    Return the first non-None result of the given suppliers.

    Suppliers are called lazily in order; later ones are never called once
    a value is found.
    """
    for supplier in suppliers:
        value = supplier()
        if value is not None:
            return value
    return None


def resolve_release(
    explicit: Optional[str],
    detect: Callable[[], Optional[str]],
) -> Optional[str]:
    """Explicit release, else the detected one, else unset."""
    return first_present(lambda: explicit, detect)


def user_from_pairs(pairs: Iterable[str]) -> User:
    """
    Build a user from ``key:value`` arguments.

    ``id``, ``email``, ``ip_address`` and ``username`` map to their fields,
    any other key goes to ``other``. The IP address defaults to
    ``{{auto}}`` when not given.

    Raises:
        EventValidationError: On a pair without colon or a bad IP address
    """
    user = User()
    for pair in pairs:
        key, value = split_key_value(pair, "user")
        if key == "id":
            user.id = value
        elif key == "email":
            user.email = value
        elif key == "ip_address":
            user.ip_address = parse_ip_address(value)
        elif key == "username":
            user.username = value
        else:
            user.other[key] = value

    if user.ip_address is None:
        user.ip_address = AUTO_IP_ADDRESS
    return user


def user_from_os(current_user: Callable[[], Optional[str]]) -> Optional[User]:
    """User named after the OS account, or None if the lookup fails."""
    name = current_user()
    if name is None:
        return None
    return User(username=name, ip_address=AUTO_IP_ADDRESS)


def resolve_user(
    pairs: Optional[Sequence[str]],
    current_user: Callable[[], Optional[str]],
) -> Optional[User]:
    """Explicit user pairs, else the OS user, else no user."""
    return first_present(
        lambda: user_from_pairs(pairs) if pairs else None,
        lambda: user_from_os(current_user),
    )
