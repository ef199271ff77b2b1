# webauthnkit

Building blocks for the relying-party side of Web Authentication (WebAuthn).
The package builds the options a server sends to the browser. It also parses
and checks the client data, authenticator data and credential members that
come back when a user registers or signs in with a security key or passkey.

Every failed check raises `webauthnkit.errors.ProtocolError`.

## Modules

### `webauthnkit.errors`

`ProtocolError` is an exception with a short `type` such as
`"invalid_request"` or `"verification_error"`. It also carries `details`,
which is what `str()` returns, `dev_info` for debugging, and an optional
wrapped exception in `err`. The methods `with_details`, `with_info` and
`with_error` each return an adjusted copy. Ready-made errors are module
constants such as `ERR_BAD_REQUEST`, `ERR_VERIFICATION` and
`ERR_PARSING_DATA`.

### `webauthnkit.cbor`

- `unmarshal(data)` decodes the first CBOR item and ignores any bytes after
  it. It raises `ValueError` on indefinite lengths, tags, duplicate map keys
  and more than four levels of nesting.
- `marshal(value)` encodes the value as canonical CBOR.

### `webauthnkit.encoding`

- `encode_url_base64(data)` returns unpadded URL-safe base64.
- `decode_url_base64(text)` accepts the text with or without padding. A
  value of `None` comes back as `None`.
- `create_challenge()` returns `CHALLENGE_LENGTH` (32) random bytes.
- `decode_json(data)` decodes exactly one JSON value. `decode_json_stream(stream)`
  reads a whole text or binary stream and decodes it the same way. Both raise
  `ValueError("The body contains trailing data")` when anything other than
  whitespace follows the value.

### `webauthnkit.client`

- `fully_qualified_origin(raw_origin)` reduces a request URI to
  `scheme://host[:port]`. It returns `android:apk-key-hash:` origins unchanged
  and raises `ValueError` for URIs it cannot parse or that have no host.
- `CollectedClientData.from_dict(data)` builds the client data from the
  decoded `clientDataJSON` object.
- `CollectedClientData.verify(stored_challenge, ceremony, rp_origins, rp_top_origins, rp_top_origins_verify)`
  checks these items in order: the ceremony type, the challenge (compared in
  constant time), the origin (case-insensitive), the top origin according to
  a `TopOriginVerificationMode` (`DEFAULT`, `IGNORE`, `AUTO`, `IMPLICIT` or
  `EXPLICIT`), and the token binding status.
- The enums `CeremonyType` and `TokenBindingStatus`, and the dataclass
  `TokenBinding`.

### `webauthnkit.authenticator`

- `AuthenticatorData.unmarshal(raw_auth_data)` parses raw authenticator data
  into the RP ID hash, the flags, the signature counter, the attested
  credential data (`AttestedCredentialData`: AAGUID, credential ID and
  re-encoded public key) and the extension data. It raises `ProtocolError`
  when the data is too short, when a flag does not match the data, when a
  credential ID is longer than 1023 bytes, or when bytes are left over.
- `AuthenticatorData.verify(rp_id_hash, app_id_hash, user_verification_required)`
  checks the RP ID hash against either hash, then the user-present flag, then
  the user-verified flag if it is required.
- `AuthenticatorFlags` is an `IntFlag` with the methods `user_present`,
  `user_verified`, `has_attested_credential_data`, `has_extensions`,
  `has_backup_eligible` and `has_backup_state`.
- The enums `CredentialMediationRequirement`, `AuthenticatorAttachment`,
  `ResidentKeyRequirement`, `AuthenticatorTransport` and
  `UserVerificationRequirement`, and the helpers `resident_key_required()`
  and `resident_key_not_required()`.

### `webauthnkit.options`

- `PublicKeyCredentialCreationOptions` and `PublicKeyCredentialRequestOptions`
  have a `to_dict()` method that returns the JSON shape expected by
  `navigator.credentials`. Byte values are URL-safe base64 and empty optional
  members are left out.
- `PublicKeyCredentialRequestOptions.get_allowed_credential_ids()` lists the
  IDs of the allowed credentials in order.
- Entities and parameters: `CredentialEntity`, `RelyingPartyEntity`,
  `UserEntity`, `CredentialDescriptor`, `CredentialParameter`,
  `AuthenticatorSelection`, `CredentialCreation`, `CredentialAssertion` and
  `ServerResponse`.
- Enums: `CredentialType`, `ConveyancePreference`, `AttestationFormat`,
  `PublicKeyCredentialHints` and `ServerResponseStatus`.
- `remap_transport(value)` maps a transport name to an
  `AuthenticatorTransport`. The legacy name `"cable"` becomes `HYBRID` and
  unknown names are returned unchanged.

### `webauthnkit.credential`

- `PublicKeyCredential.from_dict(data)` reads `id`, `type`, `rawId`,
  `clientExtensionResults` and `authenticatorAttachment` from a decoded JSON
  object.
- `PublicKeyCredential.parse()` requires a non-empty, unpadded base64url `id`
  and the type `"public-key"`, then returns a `ParsedPublicKeyCredential`.
- `ParsedPublicKeyCredential.get_app_id(auth_ext, credential_attestation_type)`
  returns the `appid` extension value that applies to a `fido-u2f`
  credential, or `""` when the extension does not apply.

### `webauthnkit.tpm`

- `parse_san_extension(value)` returns `(manufacturer, model, version)` from
  the DER subject alternative name of a TPM AIK certificate. Missing
  attributes are empty strings, and malformed DER raises `ValueError`.
- `is_valid_tpm_manufacturer(manufacturer_id)` checks an ID against
  `TPM_MANUFACTURERS`, a tuple of `TPMManufacturer` records.

## Example

```python
from webauthnkit.client import CeremonyType, CollectedClientData, TopOriginVerificationMode
from webauthnkit.encoding import create_challenge, encode_url_base64
from webauthnkit.errors import ProtocolError

challenge = encode_url_base64(create_challenge())

client_data = CollectedClientData.from_dict({
    "type": "webauthn.create",
    "challenge": challenge,
    "origin": "https://example.com",
})

try:
    client_data.verify(
        challenge,
        CeremonyType.CREATE,
        ["https://example.com"],
        [],
        TopOriginVerificationMode.IGNORE,
    )
except ProtocolError as exc:
    print(exc.type, exc.details, exc.dev_info)
```

## What it does not do

- It does not decode attestation objects.
- It does not check attestation statements or their signatures (packed,
  TPM, FIDO U2F, Android SafetyNet and so on), and it does not check
  assertion signatures.
- It does not look anything up in a metadata service.
- It has no HTTP server or request handling and no command-line program.
- It does not store credentials or sessions; keeping challenges and
  registered credentials is left to the application.

## Tests

The tests use pytest, which is available through the `test` extra.