from requests.auth import AuthBase

from .oauth1 import OAuth1Signer, SigningRequest


class OAuth1Auth(AuthBase):
    """
    Attaches an OAuth 1.0 Authorization header to outgoing `requests` calls.

    Example

        import requests
        from weeklytweet import Credentials, OAuth1Auth, OAuth1Signer
        auth = OAuth1Auth(OAuth1Signer(Credentials(key, secret, token, token_secret)))
        requests.post("https://api.twitter.com/2/tweets", json={"text": "Hi"}, auth=auth)
    """

    def __init__(self, signer: OAuth1Signer):
        self.signer = signer

    def __call__(self, request):
        signed = self.signer.adapt_request(SigningRequest(
            url=request.url,
            method=request.method,
            headers=dict(request.headers)))
        request.prepare_headers(signed.headers)
        return request
