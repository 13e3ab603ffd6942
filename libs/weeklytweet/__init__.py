__version__ = "1.0.0"

from .oauth1 import \
    OAuth1Signer, \
    Credentials, \
    SignatureMethod, \
    Base64Variant, \
    HttpMethod, \
    SigningRequest, \
    SignedRequest, \
    OAuth1Error, \
    EncodingError, \
    BaseStringError, \
    SignatureError, \
    InvalidSignatureError, \
    percent_encode, \
    generate_parameters, \
    construct_base_string, \
    generate_signature, \
    build_authorization_header
from .auth import OAuth1Auth
from .config import Settings, ConfigError, load_settings
from .pageview import PageView, AnalyticsError, parse_page_views, aggregate_page_views
from .tweet import compose_tweet
from .transport import HttpTransport, TransportError
