"""
credentials.py
--------------
Normalizes a submitted login payload into a canonical username/password pair.
Clients have sent these fields under several names over time, so each value
is looked up through a fixed alias list.
"""

from dataclasses import dataclass

IDENTIFIER_ALIASES = ("username", "usuario", "user")
SECRET_ALIASES = ("password", "pass", "contrasena", "contraseña")


@dataclass(frozen=True)
class Credentials:
    identifier: str
    secret: str


def _first_value(payload, aliases):
    """First non-empty value among ``aliases``; '' when none is set."""
    for name in aliases:
        value = payload.get(name)
        if value is None:
            continue
        value = value if isinstance(value, str) else str(value)
        if value != "":
            return value
    return ""


def resolve(payload):
    """Map an arbitrary login payload to Credentials. Never raises.

    The identifier is stripped; the secret is kept exactly as submitted so
    that padded variants of a password do not match the stored value.
    """
    if not payload:
        return Credentials(identifier="", secret="")
    return Credentials(
        identifier=_first_value(payload, IDENTIFIER_ALIASES).strip(),
        secret=_first_value(payload, SECRET_ALIASES),
    )


def payload_from_request(request):
    """Login fields from a JSON body, falling back to form data."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
