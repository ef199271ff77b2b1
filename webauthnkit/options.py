"""Options for credential creation and assertion, entities and related enumerations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .authenticator import (
    AuthenticatorAttachment,
    AuthenticatorTransport,
    CredentialMediationRequirement,
    ResidentKeyRequirement,
    UserVerificationRequirement,
)
from .encoding import encode_url_base64

STMT_X5C = "x5c"
STMT_SIGNATURE = "sig"
STMT_ALGORITHM = "alg"
STMT_VERSION = "ver"
STMT_ECDAA_KEY_ID = "ecdaaKeyId"
STMT_CERT_INFO = "certInfo"
STMT_PUB_AREA = "pubArea"

EXTENSION_APP_ID = "appid"
EXTENSION_APP_ID_EXCLUDE = "appidExclude"

# Transports that were in use under other names before being ratified.
_REMAPPED_TRANSPORTS: dict[str, AuthenticatorTransport] = {
    "cable": AuthenticatorTransport.HYBRID,
}


def remap_transport(value: str) -> AuthenticatorTransport | str:
    """Map a transport name to its AuthenticatorTransport.

    Legacy names such as "cable" are remapped; unknown names are returned unchanged.
    """
    text = _text(value)
    if text in _REMAPPED_TRANSPORTS:
        return _REMAPPED_TRANSPORTS[text]
    try:
        return AuthenticatorTransport(text)
    except ValueError:
        return text


def _text(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _challenge(value: bytes | None) -> str | None:
    return None if value is None else encode_url_base64(value)


class CredentialType(str, Enum):
    """The type of a public key credential."""

    PUBLIC_KEY = "public-key"


class ConveyancePreference(str, Enum):
    """The relying party's preference regarding attestation conveyance."""

    NONE = "none"
    INDIRECT = "indirect"
    DIRECT = "direct"
    ENTERPRISE = "enterprise"


class AttestationFormat(str, Enum):
    """Registered attestation statement formats."""

    PACKED = "packed"
    TPM = "tpm"
    ANDROID_KEY = "android-key"
    ANDROID_SAFETYNET = "android-safetynet"
    FIDO_U2F = "fido-u2f"
    APPLE = "apple"
    NONE = "none"


class PublicKeyCredentialHints(str, Enum):
    """Hints on which kind of authenticator the user is expected to use."""

    SECURITY_KEY = "security-key"
    CLIENT_DEVICE = "client-device"
    HYBRID = "hybrid"


class ServerResponseStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass
class CredentialEntity:
    """A human-palatable name of a user account or relying party."""

    name: str = ""


@dataclass
class RelyingPartyEntity(CredentialEntity):
    """The relying party; its id sets the RP ID."""

    id: str = ""

    def _to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "id": self.id}


@dataclass
class UserEntity(CredentialEntity):
    """The user account a credential is created for."""

    display_name: str = ""
    id: Any = None

    def _to_dict(self) -> dict[str, Any]:
        user_id = self.id
        if isinstance(user_id, (bytes, bytearray)):
            user_id = encode_url_base64(bytes(user_id))
        return {"name": self.name, "displayName": self.display_name, "id": user_id}


@dataclass
class CredentialDescriptor:
    """A reference to a public key credential passed to create() or get()."""

    type: CredentialType | str = CredentialType.PUBLIC_KEY
    credential_id: bytes | None = None
    transports: list[AuthenticatorTransport | str] = field(default_factory=list)
    attestation_type: str = ""

    def _to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": _text(self.type),
            "id": _challenge(self.credential_id),
        }
        if self.transports:
            result["transports"] = [_text(t) for t in self.transports]
        return result


@dataclass
class CredentialParameter:
    """A credential type and COSE algorithm the relying party accepts."""

    type: CredentialType | str = CredentialType.PUBLIC_KEY
    algorithm: int = 0

    def _to_dict(self) -> dict[str, Any]:
        return {"type": _text(self.type), "alg": int(self.algorithm)}


@dataclass
class AuthenticatorSelection:
    """The relying party's requirements regarding authenticator attributes."""

    authenticator_attachment: AuthenticatorAttachment | str = ""
    require_resident_key: bool | None = None
    resident_key: ResidentKeyRequirement | str = ""
    user_verification: UserVerificationRequirement | str = ""

    def _to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if _text(self.authenticator_attachment):
            result["authenticatorAttachment"] = _text(self.authenticator_attachment)
        if self.require_resident_key is not None:
            result["requireResidentKey"] = self.require_resident_key
        if _text(self.resident_key):
            result["residentKey"] = _text(self.resident_key)
        if _text(self.user_verification):
            result["userVerification"] = _text(self.user_verification)
        return result


@dataclass
class PublicKeyCredentialCreationOptions:
    """Parameters for creating a credential with create()."""

    relying_party: RelyingPartyEntity = field(default_factory=RelyingPartyEntity)
    user: UserEntity = field(default_factory=UserEntity)
    challenge: bytes | None = None
    parameters: list[CredentialParameter] = field(default_factory=list)
    timeout: int = 0
    credential_exclude_list: list[CredentialDescriptor] = field(default_factory=list)
    authenticator_selection: AuthenticatorSelection = field(
        default_factory=AuthenticatorSelection
    )
    hints: list[PublicKeyCredentialHints | str] = field(default_factory=list)
    attestation: ConveyancePreference | str = ""
    attestation_formats: list[AttestationFormat | str] = field(default_factory=list)
    extensions: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form; empty optional members are left out."""
        result: dict[str, Any] = {
            "rp": self.relying_party._to_dict(),
            "user": self.user._to_dict(),
            "challenge": _challenge(self.challenge),
        }
        if self.parameters:
            result["pubKeyCredParams"] = [p._to_dict() for p in self.parameters]
        if self.timeout:
            result["timeout"] = self.timeout
        if self.credential_exclude_list:
            result["excludeCredentials"] = [
                c._to_dict() for c in self.credential_exclude_list
            ]
        result["authenticatorSelection"] = self.authenticator_selection._to_dict()
        if self.hints:
            result["hints"] = [_text(h) for h in self.hints]
        if _text(self.attestation):
            result["attestation"] = _text(self.attestation)
        if self.attestation_formats:
            result["attestationFormats"] = [_text(f) for f in self.attestation_formats]
        if self.extensions:
            result["extensions"] = dict(self.extensions)
        return result


@dataclass
class PublicKeyCredentialRequestOptions:
    """Parameters for generating an assertion with get()."""

    challenge: bytes | None = None
    timeout: int = 0
    relying_party_id: str = ""
    allowed_credentials: list[CredentialDescriptor] = field(default_factory=list)
    user_verification: UserVerificationRequirement | str = ""
    hints: list[PublicKeyCredentialHints | str] = field(default_factory=list)
    extensions: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form; empty optional members are left out."""
        result: dict[str, Any] = {"challenge": _challenge(self.challenge)}
        if self.timeout:
            result["timeout"] = self.timeout
        if self.relying_party_id:
            result["rpId"] = self.relying_party_id
        if self.allowed_credentials:
            result["allowCredentials"] = [c._to_dict() for c in self.allowed_credentials]
        if _text(self.user_verification):
            result["userVerification"] = _text(self.user_verification)
        if self.hints:
            result["hints"] = [_text(h) for h in self.hints]
        if self.extensions:
            result["extensions"] = dict(self.extensions)
        return result

    def get_allowed_credential_ids(self) -> list[bytes | None]:
        """Return the credential IDs of the allowed credentials, in order."""
        return [credential.credential_id for credential in self.allowed_credentials]


@dataclass
class CredentialCreation:
    """Creation options together with the mediation requirement."""

    response: PublicKeyCredentialCreationOptions = field(
        default_factory=PublicKeyCredentialCreationOptions
    )
    mediation: CredentialMediationRequirement | str = ""


@dataclass
class CredentialAssertion:
    """Request options together with the mediation requirement."""

    response: PublicKeyCredentialRequestOptions = field(
        default_factory=PublicKeyCredentialRequestOptions
    )
    mediation: CredentialMediationRequirement | str = ""


@dataclass
class ServerResponse:
    status: ServerResponseStatus | str = ServerResponseStatus.OK
    message: str = ""