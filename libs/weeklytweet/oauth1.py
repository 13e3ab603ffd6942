"""
OAuth 1.0 request signing (RFC 5849) for protected-resource requests
with already-issued credentials. Supports HMAC-SHA1 and PLAINTEXT.
"""

import base64
import dataclasses as dc
import hashlib
import hmac
import logging
import time
import uuid
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Union
from urllib.parse import quote, urlsplit

logger = logging.getLogger(__name__)

OAUTH_VERSION = "1.0"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"
AUTHORIZATION_HEADER = "Authorization"
CONTENT_TYPE_HEADER = "Content-Type"

# Ports which are dropped from the base string URI, RFC 5849 section 3.4.1.2
DEFAULT_PORTS = {"http": 80, "https": 443}

Clock = Callable[[], float]
NonceSource = Callable[[], str]


class SignatureMethod(Enum):
    HMAC_SHA1 = "HMAC-SHA1"
    PLAINTEXT = "PLAINTEXT"


class Base64Variant(Enum):
    STANDARD = "standard"
    # Historical variant: 76-character lines joined by CRLF.
    LINE_WRAPPED_76 = "line-wrapped-76"


class HttpMethod(Enum):
    CONNECT = "CONNECT"
    DELETE = "DELETE"
    GET = "GET"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    POST = "POST"
    PUT = "PUT"
    QUERY = "QUERY"
    TRACE = "TRACE"


# Raised if a request cannot be signed. The `kind` attribute allows
# callers to tell the failure cases apart without isinstance chains.
class OAuth1Error(RuntimeError):
    kind = "oauth1"

    def __init__(self, message: str, value=None):
        super(OAuth1Error, self).__init__(message)
        self.value = value


class EncodingError(OAuth1Error):
    kind = "encoding"


class BaseStringError(OAuth1Error):
    kind = "noBaseString"


class SignatureError(OAuth1Error):
    kind = "invalidSignature"


InvalidSignatureError = SignatureError


@dc.dataclass(frozen=True)
class Credentials:
    consumer_key: str
    consumer_secret: str
    token: str
    token_secret: str

    def __post_init__(self):
        for field in dc.fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"OAuth1 credential `{field.name}` must be a non-empty string.")

    def __repr__(self):
        return f"Credentials(consumer_key={self.consumer_key!r}, token={self.token!r})"


@dc.dataclass(frozen=True)
class SigningRequest:
    """
    Outbound request description. The headers are stored as a read-only
    copy, so neither the signer nor the caller can change a request
    after it was handed over.
    """
    url: str
    method: str = "GET"
    headers: Mapping[str, str] = dc.field(default_factory=dict)
    body: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))

    def __hash__(self):
        return hash((self.url, self.method, frozenset(self.headers.items()), self.body))

    # Rebuild from plain values, the read-only header view itself cannot be copied or pickled.
    def __reduce__(self):
        return type(self), (self.url, self.method, dict(self.headers), self.body)

    def with_headers(self, headers: Mapping[str, str]) -> "SignedRequest":
        replaced = {name.lower() for name in headers}
        merged = {name: value for name, value in self.headers.items() if name.lower() not in replaced}
        merged.update(headers)
        return SignedRequest(url=self.url, method=self.method, headers=merged, body=self.body)


class SignedRequest(SigningRequest):

    @property
    def authorization(self) -> Optional[str]:
        return self.headers.get(AUTHORIZATION_HEADER)


# Percent-encode a value as described in RFC 5849 section 3.6: Every byte
# of the UTF-8 encoding outside of the unreserved set [A-Za-z0-9-._~]
# is escaped as %XX using uppercase hex digits.
def percent_encode(value: Union[str, bytes]) -> str:
    if isinstance(value, bytes):
        try:
            value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"Cannot percent-encode invalid UTF-8 data: {e}", value) from e
        raw = value
    elif isinstance(value, str):
        try:
            raw = value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError(f"Cannot percent-encode {value!r} as UTF-8: {e}", value) from e
    else:
        raise EncodingError(f"Cannot percent-encode value of type {type(value).__name__}.", value)
    return quote(raw, safe="~")


def generate_nonce() -> str:
    return uuid.uuid4().hex.upper()


def generate_timestamp(clock: Clock = time.time) -> str:
    return str(int(clock()))


def generate_parameters(
        credentials: Credentials,
        signature_method: SignatureMethod = SignatureMethod.HMAC_SHA1,
        nonce_source: NonceSource = generate_nonce,
        clock: Clock = time.time) -> Dict[str, str]:
    """
    Build the OAuth protocol parameters for a single request,
    without `oauth_signature`.
    """
    return {
        "oauth_version": OAUTH_VERSION,
        "oauth_consumer_key": credentials.consumer_key,
        "oauth_token": credentials.token,
        "oauth_signature_method": signature_method.value,
        "oauth_timestamp": generate_timestamp(clock),
        "oauth_nonce": nonce_source(),
    }


# Both the base string and the Authorization header must list the
# parameters in this order, otherwise the server computes another signature.
def sorted_parameters(parameters: Mapping[str, str]):
    return sorted(parameters.items())


# RFC 5849 section 3.4.1.3.2: keys and values are escaped before pairing,
# exactly as the Authorization header escapes them.
def normalize_parameters(parameters: Mapping[str, str]) -> str:
    return "&".join(
        f"{percent_encode(key)}={percent_encode(value)}"
        for key, value in sorted_parameters(parameters))


def parse_http_method(method: Optional[str]) -> HttpMethod:
    if not method or not isinstance(method, str):
        raise BaseStringError("Missing HTTP method.", method)
    try:
        return HttpMethod(method.strip().upper())
    except ValueError as e:
        raise BaseStringError(f"Unrecognized HTTP method `{method}`.", method) from e


def base_string_uri(url: Optional[str]) -> str:
    """
    Reduce an absolute URL to the base string URI of RFC 5849 section
    3.4.1.2: lowercase scheme and host, no default port, no query
    and no fragment.
    """
    if not url or not isinstance(url, str):
        raise BaseStringError("Missing request URL.", url)
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError as e:
        raise BaseStringError(f"Malformed request URL `{url}`: {e}", url) from e
    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS or not parts.hostname:
        raise BaseStringError(f"Request URL `{url}` is not an absolute http(s) URL.", url)
    netloc = parts.hostname.lower()
    if ":" in netloc:
        netloc = f"[{netloc}]"
    if port is not None and port != DEFAULT_PORTS[scheme]:
        netloc += f":{port}"
    return f"{scheme}://{netloc}{parts.path or '/'}"


def construct_base_string(url: Optional[str], method: Optional[str], parameters: Mapping[str, str]) -> str:
    """
    Construct the signature base string, RFC 5849 section 3.4.1.1:

        METHOD&percent_encode(URI)&percent_encode(k1=v1&k2=v2...)

    Query parameters of `url` are not merged into the parameter
    set, only the OAuth protocol parameters are signed.
    """
    http_method = parse_http_method(method)
    uri = base_string_uri(url)
    try:
        base_string = "&".join((
            http_method.value,
            percent_encode(uri),
            percent_encode(normalize_parameters(parameters))))
    except EncodingError as e:
        raise BaseStringError(f"Cannot construct base string: {e}", url) from e
    logger.debug(f"Signature base string: {base_string}")
    return base_string


def signing_key(credentials: Credentials) -> str:
    try:
        return f"{percent_encode(credentials.consumer_secret)}&{percent_encode(credentials.token_secret)}"
    except EncodingError as e:
        raise SignatureError(f"Cannot encode signing key: {e}") from e


def encode_base64(digest: bytes, variant: Base64Variant = Base64Variant.STANDARD) -> str:
    encoded = base64.b64encode(digest).decode("ascii")
    if variant == Base64Variant.LINE_WRAPPED_76:
        encoded = "\r\n".join(encoded[i:i+76] for i in range(0, len(encoded), 76))
    return encoded


def generate_signature(
        base_string: str,
        credentials: Credentials,
        signature_method: SignatureMethod = SignatureMethod.HMAC_SHA1,
        base64_variant: Base64Variant = Base64Variant.STANDARD) -> str:
    key = signing_key(credentials)
    if signature_method == SignatureMethod.PLAINTEXT:
        return key
    # https://tools.ietf.org/html/rfc5849#section-3.4.2
    digest = hmac.new(
        key.encode("utf-8"),
        base_string.encode("utf-8"),
        hashlib.sha1
    ).digest()
    return encode_base64(digest, base64_variant)


def build_authorization_header(parameters: Mapping[str, str]) -> str:
    return "OAuth " + ", ".join(
        f'{key}="{percent_encode(value)}"'
        for key, value in sorted_parameters(parameters))


class OAuth1Signer:

    def __init__(self,
                 credentials: Credentials,
                 *,
                 signature_method: SignatureMethod = SignatureMethod.HMAC_SHA1,
                 base64_variant: Base64Variant = Base64Variant.STANDARD,
                 clock: Clock = time.time,
                 nonce_source: NonceSource = generate_nonce):
        """
        Brief

            Signs outbound requests with a fixed set of OAuth 1.0 credentials.
            The signer keeps no state between calls, so one instance
            may be shared between threads.

        Arguments

            `credentials`: Consumer key/secret and access token/secret.

            `signature_method`: HMAC-SHA1 (default) or PLAINTEXT.

            `base64_variant`: Encoding of the HMAC digest. The line-wrapped
              variant reproduces the historical 76-character wrapping.

            `clock`: Returns seconds since the Unix epoch.

            `nonce_source`: Returns a fresh random nonce per call.
        """
        self.credentials = credentials
        self.signature_method = signature_method
        self.base64_variant = base64_variant
        self.clock = clock
        self.nonce_source = nonce_source

    def sign_parameters(self, url: str, method: str) -> Dict[str, str]:
        parameters = generate_parameters(
            self.credentials,
            self.signature_method,
            self.nonce_source,
            self.clock)
        base_string = construct_base_string(url, method, parameters)
        parameters["oauth_signature"] = generate_signature(
            base_string,
            self.credentials,
            self.signature_method,
            self.base64_variant)
        return parameters

    def adapt_request(self, request: SigningRequest) -> SignedRequest:
        """
        Return a signed copy of `request` which carries the OAuth
        Authorization header and a JSON Content-Type.
        """
        parameters = self.sign_parameters(request.url, request.method)
        return request.with_headers({
            AUTHORIZATION_HEADER: build_authorization_header(parameters),
            CONTENT_TYPE_HEADER: JSON_CONTENT_TYPE,
        })
