"""Tests for OAuth signer module."""

import base64
from unittest import mock
from urllib.parse import unquote

from flickr_oauth.query import base_string, canonicalize
from flickr_oauth.signer import oauth_parameters, sign, signed_url

# OAuth Core 1.0, Appendix A.5: GET photos.example.net/photos
PHOTOS_URL = "http://photos.example.net/photos"
PHOTOS_PARAMS = {
    "file": "vacation.jpg",
    "size": "original",
    "oauth_consumer_key": "dpf43f3p2l4k3l03",
    "oauth_token": "nnch734d00sl2jdk",
    "oauth_signature_method": "HMAC-SHA1",
    "oauth_timestamp": "1191242096",
    "oauth_nonce": "kllo9940pd9333jh",
    "oauth_version": "1.0",
}
PHOTOS_CONSUMER_SECRET = "kd94hf93k423kf44"
PHOTOS_TOKEN_SECRET = "pfkkdhi9sl3r4s00"
PHOTOS_BASE_STRING = (
    "GET&http%3A%2F%2Fphotos.example.net%2Fphotos&file%3Dvacation.jpg"
    "%26oauth_consumer_key%3Ddpf43f3p2l4k3l03%26oauth_nonce%3Dkllo9940pd9333jh"
    "%26oauth_signature_method%3DHMAC-SHA1%26oauth_timestamp%3D1191242096"
    "%26oauth_token%3Dnnch734d00sl2jdk%26oauth_version%3D1.0%26size%3Doriginal"
)
PHOTOS_SIGNATURE = "tR3%2BTy81lMeYAr%2FFid0kMTYa%2FWM%3D"


class TestPublishedExample:
    """Tests against the published OAuth 1.0 photos example."""

    def test_base_string(self):
        """Canonical query and base string match the published text."""
        result = base_string("GET", PHOTOS_URL, canonicalize(PHOTOS_PARAMS))
        assert result == PHOTOS_BASE_STRING

    def test_signature(self):
        """HMAC-SHA1 over the published base string gives the published signature."""
        result = sign(PHOTOS_BASE_STRING, PHOTOS_CONSUMER_SECRET, PHOTOS_TOKEN_SECRET)
        assert result == PHOTOS_SIGNATURE
        assert unquote(result) == "tR3+Ty81lMeYAr/Fid0kMTYa/WM="

    def test_signed_url(self):
        """The full signed URL carries the canonical query and the signature."""
        url = signed_url(
            "GET",
            PHOTOS_URL,
            PHOTOS_PARAMS,
            PHOTOS_CONSUMER_SECRET,
            PHOTOS_TOKEN_SECRET,
        )

        assert url == (
            f"{PHOTOS_URL}?file=vacation.jpg&oauth_consumer_key=dpf43f3p2l4k3l03"
            "&oauth_nonce=kllo9940pd9333jh&oauth_signature_method=HMAC-SHA1"
            "&oauth_timestamp=1191242096&oauth_token=nnch734d00sl2jdk"
            f"&oauth_version=1.0&size=original&oauth_signature={PHOTOS_SIGNATURE}"
        )


class TestSign:
    """Tests for HMAC-SHA1 signing."""

    BASE = "GET&https%3A%2F%2Fapi.flickr.com%2Fservices%2Frest&a%3D1"

    def test_signature_is_url_safe(self):
        """Base64 '+', '/' and '=' never appear raw."""
        for secret in ("S", "another", "x" * 40):
            signature = sign(self.BASE, secret, "ATS")
            assert not set("+/=") & set(signature)
            assert base64.b64decode(unquote(signature))

    def test_signing_is_deterministic(self):
        """Same inputs always give the same signature."""
        assert sign(self.BASE, "S", "ATS") == sign(self.BASE, "S", "ATS")

    def test_token_secret_changes_signature(self):
        """Request-token step (no token secret) signs differently."""
        assert sign(self.BASE, "S") != sign(self.BASE, "S", "ATS")

    def test_missing_token_secret_uses_empty_string(self):
        """None and '' token secrets are equivalent."""
        assert sign(self.BASE, "S", None) == sign(self.BASE, "S", "")

    def test_secrets_are_encoded_before_joining(self):
        """An '&' inside a secret can't shift the key split point."""
        assert sign(self.BASE, "a&b", "c") != sign(self.BASE, "a", "b&c")


class TestOAuthParameters:
    """Tests for per-request parameter sets."""

    def test_required_fields_present(self):
        """Consumer key, nonce, timestamp and method are always set."""
        params = oauth_parameters("K")

        assert params["oauth_consumer_key"] == "K"
        assert params["oauth_signature_method"] == "HMAC-SHA1"
        assert params["oauth_version"] == "1.0"
        assert params["oauth_nonce"]
        assert params["oauth_timestamp"].isdigit()

    @mock.patch("time.time", return_value=1318622958.7)
    def test_timestamp_is_epoch_seconds(self, mock_time):
        """Timestamp is truncated epoch seconds."""
        assert oauth_parameters("K")["oauth_timestamp"] == "1318622958"

    def test_nonce_is_fresh_per_call(self):
        """Each call draws a new nonce."""
        assert oauth_parameters("K")["oauth_nonce"] != oauth_parameters("K")["oauth_nonce"]

    def test_extra_fields_are_included(self):
        """Call-specific fields are merged in."""
        params = oauth_parameters("K", method="flickr.test.login", oauth_token="AT")

        assert params["method"] == "flickr.test.login"
        assert params["oauth_token"] == "AT"


class TestSignedUrl:
    """Tests for signed URL assembly."""

    URL = "https://api.flickr.com/services/rest"
    PARAMS = {
        "oauth_consumer_key": "K",
        "oauth_nonce": "n",
        "oauth_timestamp": "1",
        "oauth_signature_method": "HMAC-SHA1",
        "method": "flickr.auth.oauth.checkToken",
    }

    def test_signature_appended_after_canonical_query(self):
        """URL is url?canonical&oauth_signature=sig."""
        query = canonicalize(self.PARAMS)
        signature = sign(base_string("GET", self.URL, query), "S", "ATS")

        url = signed_url("GET", self.URL, self.PARAMS, "S", "ATS")

        assert url == f"{self.URL}?{query}&oauth_signature={signature}"

    def test_signature_not_part_of_signed_parameters(self):
        """An appended signature doesn't feed back into signing."""
        url = signed_url("GET", self.URL, self.PARAMS, "S", "ATS")

        assert "oauth_signature" not in self.PARAMS
        assert url.count("oauth_signature=") == 1
