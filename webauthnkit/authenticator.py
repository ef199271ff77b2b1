"""Authenticator data parsing, flags and the authenticator-related enumerations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag

from . import cbor
from .errors import ERR_BAD_REQUEST, ERR_VERIFICATION

MIN_AUTH_DATA_LENGTH = 37
MIN_ATTESTED_AUTH_LENGTH = 55
MAX_CREDENTIAL_ID_LENGTH = 1023

_RP_ID_HASH_END = 32
_AAGUID_END = 53


class CredentialMediationRequirement(str, Enum):
    """Mediation requirements a relying party may set for get() or create()."""

    SILENT = "silent"
    OPTIONAL = "optional"
    CONDITIONAL = "conditional"
    REQUIRED = "required"


class AuthenticatorAttachment(str, Enum):
    """How an authenticator is attached to the client device."""

    PLATFORM = "platform"
    CROSS_PLATFORM = "cross-platform"


class ResidentKeyRequirement(str, Enum):
    """The relying party's requirement for client-side discoverable credentials."""

    DISCOURAGED = "discouraged"
    PREFERRED = "preferred"
    REQUIRED = "required"


class AuthenticatorTransport(str, Enum):
    """Hints on how a client may reach an authenticator."""

    USB = "usb"
    NFC = "nfc"
    BLE = "ble"
    SMART_CARD = "smart-card"
    HYBRID = "hybrid"
    INTERNAL = "internal"


class UserVerificationRequirement(str, Enum):
    """The relying party's requirement for user verification."""

    REQUIRED = "required"
    PREFERRED = "preferred"
    DISCOURAGED = "discouraged"


class AuthenticatorFlags(IntFlag):
    """The flags byte of the authenticator data; bit 0 is the least significant."""

    USER_PRESENT = 0x01
    RFU1 = 0x02
    USER_VERIFIED = 0x04
    BACKUP_ELIGIBLE = 0x08
    BACKUP_STATE = 0x10
    RFU2 = 0x20
    ATTESTED_CREDENTIAL_DATA = 0x40
    HAS_EXTENSIONS = 0x80

    def _has(self, flag: "AuthenticatorFlags") -> bool:
        return (int(self) & int(flag)) == int(flag)

    def user_present(self) -> bool:
        """Whether the UP flag is set."""
        return self._has(AuthenticatorFlags.USER_PRESENT)

    def user_verified(self) -> bool:
        """Whether the UV flag is set."""
        return self._has(AuthenticatorFlags.USER_VERIFIED)

    def has_attested_credential_data(self) -> bool:
        """Whether the AT flag is set."""
        return self._has(AuthenticatorFlags.ATTESTED_CREDENTIAL_DATA)

    def has_extensions(self) -> bool:
        """Whether the ED flag is set."""
        return self._has(AuthenticatorFlags.HAS_EXTENSIONS)

    def has_backup_eligible(self) -> bool:
        """Whether the BE flag is set."""
        return self._has(AuthenticatorFlags.BACKUP_ELIGIBLE)

    def has_backup_state(self) -> bool:
        """Whether the BS flag is set."""
        return self._has(AuthenticatorFlags.BACKUP_STATE)


@dataclass
class AttestedCredentialData:
    """The attested credential data carried in the authenticator data."""

    aaguid: bytes = b""
    credential_id: bytes = b""
    credential_public_key: bytes = b""


def _canonical_public_key(key_bytes: bytes) -> bytes:
    return cbor.marshal(cbor.unmarshal(key_bytes))


def _parse_attested_data(raw: bytes) -> AttestedCredentialData:
    aaguid = raw[MIN_AUTH_DATA_LENGTH:_AAGUID_END]
    id_length = int.from_bytes(raw[_AAGUID_END:MIN_ATTESTED_AUTH_LENGTH], "big")
    if len(raw) < MIN_ATTESTED_AUTH_LENGTH + id_length:
        raise ERR_BAD_REQUEST.with_details(
            "Authenticator attestation data length too short"
        )
    if id_length > MAX_CREDENTIAL_ID_LENGTH:
        raise ERR_BAD_REQUEST.with_details(
            "Authenticator attestation data credential id length too long"
        )
    key_start = MIN_ATTESTED_AUTH_LENGTH + id_length
    credential_id = raw[MIN_ATTESTED_AUTH_LENGTH:key_start]
    try:
        public_key = _canonical_public_key(raw[key_start:])
    except (ValueError, TypeError) as exc:
        raise ERR_BAD_REQUEST.with_details(
            f"Could not unmarshal Credential Public Key: {exc}"
        ).with_error(exc) from exc
    return AttestedCredentialData(
        aaguid=aaguid, credential_id=credential_id, credential_public_key=public_key
    )


@dataclass
class AuthenticatorData:
    """The authenticator data structure returned by the authenticator."""

    rp_id_hash: bytes = b""
    flags: AuthenticatorFlags = AuthenticatorFlags(0)
    counter: int = 0
    att_data: AttestedCredentialData = field(default_factory=AttestedCredentialData)
    ext_data: bytes = b""

    @classmethod
    def unmarshal(cls, raw_auth_data: bytes) -> "AuthenticatorData":
        """Parse raw authenticator data; raises ProtocolError when it is malformed."""
        raw = bytes(raw_auth_data)
        if len(raw) < MIN_AUTH_DATA_LENGTH:
            raise ERR_BAD_REQUEST.with_details(
                "Authenticator data length too short"
            ).with_info(
                f"Expected data greater than {MIN_AUTH_DATA_LENGTH} bytes. "
                f"Got {len(raw)} bytes"
            )

        result = cls(
            rp_id_hash=raw[:_RP_ID_HASH_END],
            flags=AuthenticatorFlags(raw[_RP_ID_HASH_END]),
            counter=int.from_bytes(raw[33:MIN_AUTH_DATA_LENGTH], "big"),
        )
        remaining = len(raw) - MIN_AUTH_DATA_LENGTH

        if result.flags.has_attested_credential_data():
            if len(raw) <= MIN_ATTESTED_AUTH_LENGTH:
                raise ERR_BAD_REQUEST.with_details(
                    "Attested credential flag set but data is missing"
                )
            att = _parse_attested_data(raw)
            result.att_data = att
            remaining -= (
                len(att.aaguid)
                + 2
                + len(att.credential_id)
                + len(att.credential_public_key)
            )
        elif not result.flags.has_extensions() and len(raw) != MIN_AUTH_DATA_LENGTH:
            raise ERR_BAD_REQUEST.with_details("Attested credential flag not set")

        if result.flags.has_extensions():
            if remaining == 0:
                raise ERR_BAD_REQUEST.with_details(
                    "Extensions flag set but extensions data is missing"
                )
            result.ext_data = raw[len(raw) - remaining:]
            remaining -= len(result.ext_data)

        if remaining != 0:
            raise ERR_BAD_REQUEST.with_details("Leftover bytes decoding AuthenticatorData")

        return result

    def verify(
        self,
        rp_id_hash: bytes,
        app_id_hash: bytes | None,
        user_verification_required: bool,
    ) -> None:
        """Check the RP ID hash and the presence and verification flags.

        Raises ProtocolError on the first check that fails.
        """
        stored = bytes(self.rp_id_hash)
        expected = bytes(rp_id_hash or b"")
        app_id = bytes(app_id_hash or b"")
        if stored != expected and stored != app_id:
            raise ERR_VERIFICATION.with_info(
                f"RP Hash mismatch. Expected {stored.hex()} and Received {expected.hex()}"
            )

        if not self.flags.user_present():
            raise ERR_VERIFICATION.with_info(
                "User presence flag not set by authenticator\n"
            )

        if user_verification_required and not self.flags.user_verified():
            raise ERR_VERIFICATION.with_info(
                "User verification required but flag not set by authenticator\n"
            )


def resident_key_required() -> bool:
    """Require the private key to be resident on the client device."""
    return True


def resident_key_not_required() -> bool:
    """Do not require the private key to be resident on the client device."""
    return False