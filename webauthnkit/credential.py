"""Public key credentials returned by the client and their parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .authenticator import AuthenticatorAttachment
from .encoding import decode_url_base64
from .errors import ERR_BAD_REQUEST, ProtocolError
from .options import EXTENSION_APP_ID, CredentialType

CREDENTIAL_TYPE_FIDO_U2F = "fido-u2f"

_PARSE_ERROR = "Parse error for Registration"

_ATTACHMENTS = {attachment.value: attachment for attachment in AuthenticatorAttachment}


def _parse_error(info: str, err: BaseException | None = None) -> ProtocolError:
    error = ERR_BAD_REQUEST.with_details(_PARSE_ERROR).with_info(info)
    return error.with_error(err) if err is not None else error


def _string_member(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"member {key!r} must be a string, not {type(value).__name__}")
    return value


def _decode_raw_url_base64(text: str) -> bytes:
    """Decode unpadded URL-safe base64; padding characters are rejected."""
    if "=" in text:
        raise ValueError("illegal base64 data")
    decoded = decode_url_base64(text)
    return b"" if decoded is None else decoded


@dataclass
class Credential:
    """The basic credential: an identifier and a credential type."""

    id: str = ""
    type: str = ""


@dataclass
class ParsedPublicKeyCredential(Credential):
    """A public key credential whose members have been validated."""

    raw_id: bytes | None = None
    client_extension_results: dict[str, Any] | None = None
    authenticator_attachment: AuthenticatorAttachment | None = None

    def get_app_id(
        self,
        auth_ext: Mapping[str, Any] | None,
        credential_attestation_type: str,
    ) -> str:
        """Return the appid extension value that applies to this credential.

        An empty string means the appid extension does not apply. Raises
        ProtocolError when the client output or the session data is inconsistent.
        """
        if auth_ext is None:
            return ""
        if self.client_extension_results is None:
            return ""
        if credential_attestation_type != CREDENTIAL_TYPE_FIDO_U2F:
            return ""
        if EXTENSION_APP_ID not in self.client_extension_results:
            return ""

        enable_app_id = self.client_extension_results[EXTENSION_APP_ID]
        if not isinstance(enable_app_id, bool):
            raise ERR_BAD_REQUEST.with_details(
                "Client Output appid did not have the expected type"
            )
        if not enable_app_id:
            return ""

        if EXTENSION_APP_ID not in auth_ext:
            raise ERR_BAD_REQUEST.with_details(
                "Session Data does not have an appid but Client Output indicates it should be set"
            )
        app_id = auth_ext[EXTENSION_APP_ID]
        if not isinstance(app_id, str):
            raise ERR_BAD_REQUEST.with_details(
                "Session Data appid did not have the expected type"
            )
        return app_id


@dataclass
class PublicKeyCredential(Credential):
    """A public key credential as sent by the client, before validation."""

    raw_id: bytes | None = None
    client_extension_results: dict[str, Any] | None = None
    authenticator_attachment: str = ""
    _extra: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PublicKeyCredential":
        """Build from the decoded JSON object; raises ProtocolError on bad members."""
        if not isinstance(data, Mapping):
            raise _parse_error("credential must be a JSON object")
        try:
            raw_id_text = data.get("rawId")
            if raw_id_text is not None and not isinstance(raw_id_text, str):
                raise TypeError("member 'rawId' must be a string")
            raw_id = decode_url_base64(raw_id_text)
            results = data.get("clientExtensionResults")
            if results is not None and not isinstance(results, Mapping):
                raise TypeError("member 'clientExtensionResults' must be an object")
            return cls(
                id=_string_member(data, "id"),
                type=_string_member(data, "type"),
                raw_id=raw_id,
                client_extension_results=None if results is None else dict(results),
                authenticator_attachment=_string_member(data, "authenticatorAttachment"),
                _extra={
                    key: value
                    for key, value in data.items()
                    if key
                    not in {
                        "id",
                        "type",
                        "rawId",
                        "clientExtensionResults",
                        "authenticatorAttachment",
                    }
                },
            )
        except (TypeError, ValueError) as exc:
            raise _parse_error(str(exc), exc) from exc

    def parse(self) -> ParsedPublicKeyCredential:
        """Validate the identifier and type and return the parsed credential."""
        if self.id == "":
            raise _parse_error("Missing ID")

        try:
            decoded_id = _decode_raw_url_base64(self.id)
        except ValueError:
            decoded_id = b""
        if not decoded_id:
            raise _parse_error("ID not base64.RawURLEncoded")

        if self.type == "":
            raise _parse_error("Missing type")
        if self.type != CredentialType.PUBLIC_KEY.value:
            raise _parse_error("Type not public-key")

        return ParsedPublicKeyCredential(
            id=self.id,
            type=self.type,
            raw_id=self.raw_id,
            client_extension_results=self.client_extension_results,
            authenticator_attachment=_ATTACHMENTS.get(self.authenticator_attachment),
        )