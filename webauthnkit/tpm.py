"""TPM attestation helpers: AIK certificate SAN parsing and TPM vendor checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, NamedTuple

NAME_TYPE_DN = 4

OID_TCG_KP_AIK_CERTIFICATE = "2.23.133.8.3"
OID_TCG_AT_TPM_MANUFACTURER = "2.23.133.2.1"
OID_TCG_AT_TPM_MODEL = "2.23.133.2.2"
OID_TCG_AT_TPM_VERSION = "2.23.133.2.3"
OID_EXTENSION_SUBJECT_ALT_NAME = "2.5.29.17"
OID_EXTENSION_EXTENDED_KEY_USAGE = "2.5.29.37"
OID_EXTENSION_BASIC_CONSTRAINTS = "2.5.29.19"
OID_KP_PRIVACY_CA = "1.3.6.1.4.1.311.21.36"

_CLASS_UNIVERSAL = 0
_TAG_OID = 6
_TAG_SEQUENCE = 16
_TAG_SET = 17

_STRING_DECODERS: dict[int, Callable[[bytes], str]] = {
    12: lambda b: b.decode("utf-8"),  # UTF8String
    18: lambda b: b.decode("ascii"),  # NumericString
    19: lambda b: b.decode("ascii"),  # PrintableString
    20: lambda b: b.decode("latin-1"),  # T61String
    22: lambda b: b.decode("ascii"),  # IA5String
    30: lambda b: b.decode("utf-16-be"),  # BMPString
}


@dataclass(frozen=True)
class TPMManufacturer:
    """A TPM vendor as registered with the TCG."""

    id: str
    name: str
    code: str


TPM_MANUFACTURERS: tuple[TPMManufacturer, ...] = (
    TPMManufacturer("414D4400", "AMD", "AMD"),
    TPMManufacturer("414E5400", "Ant Group", "ANT"),
    TPMManufacturer("41544D4C", "Atmel", "ATML"),
    TPMManufacturer("4252434D", "Broadcom", "BRCM"),
    TPMManufacturer("4353434F", "Cisco", "CSCO"),
    TPMManufacturer("464C5953", "Flyslice Technologies", "FLYS"),
    TPMManufacturer("524F4343", "Fuzhou Rockchip", "ROCC"),
    TPMManufacturer("474F4F47", "Google", "GOOG"),
    TPMManufacturer("48504900", "HPI", "HPI"),
    TPMManufacturer("48504500", "HPE", "HPE"),
    TPMManufacturer("48495349", "Huawei", "HISI"),
    TPMManufacturer("49424d00", "IBM", "IBM"),
    TPMManufacturer("49424D00", "IBM", "IBM"),
    TPMManufacturer("49465800", "Infineon", "IFX"),
    TPMManufacturer("494E5443", "Intel", "INTC"),
    TPMManufacturer("4C454E00", "Lenovo", "LEN"),
    TPMManufacturer("4D534654", "Microsoft", "MSFT"),
    TPMManufacturer("4E534D20", "National Semiconductor", "NSM"),
    TPMManufacturer("4E545A00", "Nationz", "NTZ"),
    TPMManufacturer("4E544300", "Nuvoton Technology", "NTC"),
    TPMManufacturer("51434F4D", "Qualcomm", "QCOM"),
    TPMManufacturer("534D534E", "Samsung", "SECE"),
    TPMManufacturer("53454345", "SecEdge", "SecEdge"),
    TPMManufacturer("534E5300", "Sinosun", "SNS"),
    TPMManufacturer("534D5343", "SMSC", "SMSC"),
    TPMManufacturer("53544D20", "ST Microelectronics", "STM"),
    TPMManufacturer("54584E00", "Texas Instruments", "TXN"),
    TPMManufacturer("57454300", "Winbond", "WEC"),
    TPMManufacturer("5345414C", "Wisekey", "SEAL"),
    TPMManufacturer("FFFFF1D0", "FIDO Alliance Conformance Testing", "FIDO"),
)


class _TLV(NamedTuple):
    cls: int
    constructed: bool
    tag: int
    content: bytes


def _read_tlv(data: bytes) -> tuple[_TLV, bytes]:
    """Read one DER element and return it with the bytes that follow."""
    if len(data) < 2:
        raise ValueError("asn1: syntax error: data truncated")
    first = data[0]
    cls, constructed, tag = first >> 6, bool(first & 0x20), first & 0x1F
    pos = 1
    if tag == 0x1F:
        tag = 0
        while True:
            if pos >= len(data):
                raise ValueError("asn1: syntax error: data truncated")
            byte = data[pos]
            pos += 1
            tag = (tag << 7) | (byte & 0x7F)
            if not byte & 0x80:
                break
    if pos >= len(data):
        raise ValueError("asn1: syntax error: data truncated")
    length_byte = data[pos]
    pos += 1
    if length_byte == 0x80:
        raise ValueError("asn1: syntax error: indefinite length found (not DER)")
    if length_byte & 0x80:
        count = length_byte & 0x7F
        if pos + count > len(data):
            raise ValueError("asn1: syntax error: data truncated")
        length_bytes = data[pos:pos + count]
        pos += count
        if length_bytes[0] == 0:
            raise ValueError("asn1: structure error: superfluous leading zeros in length")
        length = int.from_bytes(length_bytes, "big")
        if length < 0x80:
            raise ValueError("asn1: structure error: non-minimal length")
    else:
        length = length_byte
    end = pos + length
    if end > len(data):
        raise ValueError("asn1: syntax error: data truncated")
    return _TLV(cls, constructed, tag, data[pos:end]), data[end:]


def _iter_tlv(data: bytes) -> Iterator[_TLV]:
    rest = data
    while rest:
        element, rest = _read_tlv(rest)
        yield element


def _expect(element: _TLV, tag: int, what: str) -> None:
    if element.cls != _CLASS_UNIVERSAL or element.tag != tag or not element.constructed:
        raise ValueError(f"asn1: structure error: expected {what}")


def _decode_oid(content: bytes) -> str:
    if not content:
        raise ValueError("asn1: syntax error: zero length OBJECT IDENTIFIER")
    values: list[int] = []
    current = 0
    for byte in content:
        current = (current << 7) | (byte & 0x7F)
        if not byte & 0x80:
            values.append(current)
            current = 0
    if content[-1] & 0x80:
        raise ValueError("asn1: syntax error: truncated base 128 integer")
    first = values[0]
    head = [0, first] if first < 40 else [1, first - 40] if first < 80 else [2, first - 80]
    return ".".join(str(v) for v in head + values[1:])


def _decode_string(element: _TLV) -> str | None:
    if element.cls != _CLASS_UNIVERSAL or element.constructed:
        return None
    decoder = _STRING_DECODERS.get(element.tag)
    if decoder is None:
        return None
    try:
        return decoder(element.content)
    except UnicodeDecodeError as exc:
        raise ValueError(f"asn1: invalid string: {exc}") from exc


def _iter_attributes(name: bytes) -> Iterator[tuple[str, str | None]]:
    """Yield (type OID, string value or None) for each attribute of a DER Name."""
    sequence, _ = _read_tlv(name)
    _expect(sequence, _TAG_SEQUENCE, "RDN sequence")
    for rdn in _iter_tlv(sequence.content):
        _expect(rdn, _TAG_SET, "relative distinguished name set")
        for atv in _iter_tlv(rdn.content):
            _expect(atv, _TAG_SEQUENCE, "attribute type and value")
            parts = list(_iter_tlv(atv.content))
            if len(parts) < 2:
                raise ValueError("asn1: syntax error: sequence truncated")
            oid, value = parts[0], parts[1]
            if oid.cls != _CLASS_UNIVERSAL or oid.tag != _TAG_OID:
                raise ValueError("asn1: structure error: expected OBJECT IDENTIFIER")
            yield _decode_oid(oid.content), _decode_string(value)


def _iter_san(extension: bytes) -> Iterator[tuple[int, bytes]]:
    """Yield (tag, content) for each GeneralName of a SubjectAltName extension."""
    sequence, rest = _read_tlv(bytes(extension))
    if rest:
        raise ValueError("x509: trailing data after X.509 extension")
    if (
        not sequence.constructed
        or sequence.tag != _TAG_SEQUENCE
        or sequence.cls != _CLASS_UNIVERSAL
    ):
        raise ValueError("asn1: structure error: bad SAN sequence")
    for name in _iter_tlv(sequence.content):
        yield name.tag, name.content


def _strip_id(value: str) -> str:
    return value[3:] if value.startswith("id:") else value


def parse_san_extension(value: bytes) -> tuple[str, str, str]:
    """Return (manufacturer, model, version) from a TPM AIK certificate SAN.

    Missing attributes come back as empty strings; malformed DER raises ValueError.
    """
    manufacturer = model = version = ""
    for tag, data in _iter_san(value):
        if tag != NAME_TYPE_DN:
            continue
        for oid, text in _iter_attributes(data):
            if text is None:
                continue
            if oid == OID_TCG_AT_TPM_MANUFACTURER:
                manufacturer = _strip_id(text)
            if oid == OID_TCG_AT_TPM_MODEL:
                model = text
            if oid == OID_TCG_AT_TPM_VERSION:
                version = _strip_id(text)
    return manufacturer, model, version


def is_valid_tpm_manufacturer(manufacturer_id: str) -> bool:
    """Whether the identifier is one of the registered TPM vendor IDs."""
    return any(m.id == manufacturer_id for m in TPM_MANUFACTURERS)