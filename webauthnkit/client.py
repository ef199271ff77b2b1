"""Client data collected by the browser and its verification."""

from __future__ import annotations

import hmac
import json
from dataclasses import dataclass
from enum import Enum, IntEnum
from string import ascii_letters, digits
from typing import Any, Iterable, Mapping

from .errors import ERR_NOT_IMPLEMENTED, ERR_PARSING_DATA, ERR_VERIFICATION


class CeremonyType(str, Enum):
    CREATE = "webauthn.create"
    ASSERT = "webauthn.get"


class TokenBindingStatus(str, Enum):
    PRESENT = "present"
    SUPPORTED = "supported"
    NOT_SUPPORTED = "not-supported"


class TopOriginVerificationMode(IntEnum):
    """How the topOrigin member of the client data is checked."""

    DEFAULT = 0
    IGNORE = 1
    AUTO = 2
    IMPLICIT = 3
    EXPLICIT = 4


@dataclass
class TokenBinding:
    status: str
    id: str = ""


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _go_list(values: Iterable[str]) -> str:
    return "[" + " ".join(values) + "]"


_SCHEME_EXTRA = set(digits + "+-.")
_HOST_ALLOWED = set(ascii_letters + digits + "-_.~!$&'()*+,;=:[]<>\"%")
_USERINFO_ALLOWED = set(ascii_letters + digits + "-._:~!$&'()*+,;=%@")


def _url_error(raw: str, message: str) -> ValueError:
    return ValueError(f"parse {json.dumps(raw)}: {message}")


def _split_scheme(raw: str) -> tuple[str, str]:
    for i, ch in enumerate(raw):
        if ch.isascii() and ch.isalpha():
            continue
        if ch in _SCHEME_EXTRA:
            if i == 0:
                return "", raw
            continue
        if ch == ":":
            if i == 0:
                raise _url_error(raw, "missing protocol scheme")
            return raw[:i], raw[i + 1:]
        return "", raw
    return "", raw


def _valid_port(port: str) -> bool:
    return port == "" or (port.startswith(":") and all(c in digits for c in port[1:]))


def _parse_host(raw: str, authority: str) -> str:
    userinfo, at, host = authority.rpartition("@")
    if at and not all(c in _USERINFO_ALLOWED for c in userinfo):
        raise _url_error(raw, "net/url: invalid userinfo")
    if host.startswith("["):
        close = host.find("]")
        if close < 0:
            raise _url_error(raw, "missing ']' in host")
        port = host[close + 1:]
        if not _valid_port(port):
            raise _url_error(raw, f"invalid port {json.dumps(port)} after host")
    else:
        colon = host.rfind(":")
        if colon >= 0 and not _valid_port(host[colon:]):
            raise _url_error(raw, f"invalid port {json.dumps(host[colon:])} after host")
    for ch in host:
        if ord(ch) < 0x80 and ch not in _HOST_ALLOWED:
            raise _url_error(raw, f"invalid character {json.dumps(ch)} in host name")
    return host


def fully_qualified_origin(raw_origin: str) -> str:
    """Return the origin of a request URI as ``scheme://host[:port]``.

    Android APK key hash origins are returned unchanged.
    """
    if raw_origin.startswith("android:apk-key-hash:"):
        return raw_origin
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in raw_origin):
        raise _url_error(raw_origin, "net/url: invalid control character in URL")
    if raw_origin == "":
        raise _url_error(raw_origin, "empty url")

    host = ""
    scheme = ""
    if raw_origin != "*":
        scheme, rest = _split_scheme(raw_origin)
        scheme = scheme.lower()
        rest = rest.partition("?")[0]
        if not rest.startswith("/"):
            if not scheme:
                raise _url_error(raw_origin, "invalid URI for request")
        elif scheme and rest.startswith("//"):
            authority = rest[2:].partition("/")[0]
            host = _parse_host(raw_origin, authority)

    if host == "":
        raise ValueError(f"url '{raw_origin}' does not have a host")
    return f"{scheme}://{host}"


def _contains_fold(candidates: Iterable[str], value: str) -> bool:
    folded = value.casefold()
    return any(candidate.casefold() == folded for candidate in candidates)


@dataclass
class CollectedClientData:
    """The clientDataJSON contents sent back by the client."""

    type: str
    challenge: str
    origin: str
    top_origin: str = ""
    cross_origin: bool = False
    token_binding: TokenBinding | None = None
    hint: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CollectedClientData":
        """Build from the decoded clientDataJSON object."""
        binding = data.get("tokenBinding")
        token_binding = None
        if isinstance(binding, Mapping):
            token_binding = TokenBinding(
                status=binding.get("status") or "", id=binding.get("id") or ""
            )
        return cls(
            type=data.get("type") or "",
            challenge=data.get("challenge") or "",
            origin=data.get("origin") or "",
            top_origin=data.get("topOrigin") or "",
            cross_origin=bool(data.get("crossOrigin", False)),
            token_binding=token_binding,
            hint=data.get("new_keys_may_be_added_here") or "",
        )

    def verify(
        self,
        stored_challenge: str,
        ceremony: CeremonyType | str,
        rp_origins: Iterable[str] | None,
        rp_top_origins: Iterable[str] | None,
        rp_top_origins_verify: TopOriginVerificationMode,
    ) -> None:
        """Check type, challenge, origin, top origin and token binding.

        Raises ProtocolError on the first check that fails.
        """
        origins = list(rp_origins or [])
        top_origins = list(rp_top_origins or [])

        if _text(self.type) != _text(ceremony):
            raise ERR_VERIFICATION.with_details("Error validating ceremony type").with_info(
                f"Expected Value: {_text(ceremony)}, Received: {_text(self.type)}"
            )

        if not hmac.compare_digest(
            stored_challenge.encode("utf-8"), self.challenge.encode("utf-8")
        ):
            raise ERR_VERIFICATION.with_details("Error validating challenge").with_info(
                f"Expected b Value: {json.dumps(stored_challenge)}\n"
                f"Received b: {json.dumps(self.challenge)}\n"
            )

        try:
            fq_origin = fully_qualified_origin(self.origin)
        except ValueError as exc:
            raise ERR_PARSING_DATA.with_details(
                "Error decoding clientData origin as URL"
            ).with_error(exc) from exc

        if not _contains_fold(origins, fq_origin):
            raise ERR_VERIFICATION.with_details("Error validating origin").with_info(
                f"Expected Values: {_go_list(origins)}, Received: {fq_origin}"
            )

        if rp_top_origins_verify != TopOriginVerificationMode.IGNORE and self.top_origin:
            if not self.cross_origin:
                raise ERR_VERIFICATION.with_details("Error validating topOrigin").with_info(
                    "The topOrigin can't have values unless crossOrigin is true."
                )
            try:
                fq_top_origin = fully_qualified_origin(self.top_origin)
            except ValueError as exc:
                raise ERR_PARSING_DATA.with_details(
                    "Error decoding clientData topOrigin as URL"
                ).with_error(exc) from exc

            if rp_top_origins_verify == TopOriginVerificationMode.EXPLICIT:
                possible = top_origins
            elif rp_top_origins_verify == TopOriginVerificationMode.AUTO:
                possible = top_origins + origins
            elif rp_top_origins_verify == TopOriginVerificationMode.IMPLICIT:
                possible = origins
            else:
                raise ERR_NOT_IMPLEMENTED.with_details(
                    "Error handling unknown Top Origin verification mode"
                )

            if not _contains_fold(possible, fq_top_origin):
                raise ERR_VERIFICATION.with_details("Error validating top origin").with_info(
                    f"Expected Values: {_go_list(possible)}, Received: {fq_top_origin}"
                )

        if self.token_binding is not None:
            status = _text(self.token_binding.status)
            if status == "":
                raise ERR_PARSING_DATA.with_details(
                    "Error decoding clientData, token binding present without status"
                )
            if status not in {s.value for s in TokenBindingStatus}:
                raise ERR_PARSING_DATA.with_details(
                    "Error decoding clientData, token binding present with invalid status"
                ).with_info(f"Got: {status}")