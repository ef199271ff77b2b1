"""Protocol errors raised while parsing and verifying WebAuthn data."""

from __future__ import annotations


class ProtocolError(Exception):
    """A WebAuthn protocol failure with a short type, details and debug info."""

    def __init__(
        self,
        error_type: str,
        details: str,
        dev_info: str = "",
        err: BaseException | None = None,
    ) -> None:
        super().__init__(details)
        self.type = error_type
        self.details = details
        self.dev_info = dev_info
        self.err = err
        if err is not None:
            self.__cause__ = err

    def __str__(self) -> str:
        return self.details

    def __repr__(self) -> str:
        return (
            f"ProtocolError(type={self.type!r}, details={self.details!r}, "
            f"dev_info={self.dev_info!r})"
        )

    def _copy(self, **changes) -> "ProtocolError":
        fields = {
            "error_type": self.type,
            "details": self.details,
            "dev_info": self.dev_info,
            "err": self.err,
        }
        fields.update(changes)
        return ProtocolError(**fields)

    def with_details(self, details: str) -> "ProtocolError":
        """Return a copy of this error with new details."""
        return self._copy(details=details)

    def with_info(self, info: str) -> "ProtocolError":
        """Return a copy of this error with new debugging information."""
        return self._copy(dev_info=info)

    def with_error(self, err: BaseException | None) -> "ProtocolError":
        """Return a copy of this error wrapping an underlying exception."""
        return self._copy(err=err)


ERR_BAD_REQUEST = ProtocolError("invalid_request", "Error reading the request data")
ERR_CHALLENGE_MISMATCH = ProtocolError(
    "challenge_mismatch", "Stored challenge and received challenge do not match"
)
ERR_PARSING_DATA = ProtocolError("parse_error", "Error parsing the authenticator response")
ERR_AUTH_DATA = ProtocolError("auth_data", "Error verifying the authenticator data")
ERR_VERIFICATION = ProtocolError(
    "verification_error", "Error validating the authenticator response"
)
ERR_ATTESTATION = ProtocolError(
    "attestation_error", "Error validating the attestation data provided"
)
ERR_INVALID_ATTESTATION = ProtocolError("invalid_attestation", "Invalid attestation data")
ERR_METADATA = ProtocolError("invalid_metadata", "")
ERR_ATTESTATION_FORMAT = ProtocolError("invalid_attestation", "Invalid attestation format")
ERR_ATTESTATION_CERTIFICATE = ProtocolError(
    "invalid_certificate", "Invalid attestation certificate"
)
ERR_ASSERTION_SIGNATURE = ProtocolError(
    "invalid_signature",
    "Assertion Signature against auth data and client hash is not valid",
)
ERR_UNSUPPORTED_KEY = ProtocolError("invalid_key_type", "Unsupported Public Key Type")
ERR_UNSUPPORTED_ALGORITHM = ProtocolError(
    "unsupported_key_algorithm", "Unsupported public key algorithm"
)
ERR_NOT_SPEC_IMPLEMENTED = ProtocolError(
    "spec_unimplemented", "This field is not yet supported by the WebAuthn spec"
)
ERR_NOT_IMPLEMENTED = ProtocolError(
    "not_implemented", "This field is not yet supported by this library"
)