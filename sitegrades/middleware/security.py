import tldextract
from validators import domain as validate_domain
from validators.utils import ValidationError

from sitegrades.core.exceptions.exceptions import InvalidDomainFormatError

# offline extractor: only the public suffix snapshot bundled with tldextract
_extract = tldextract.TLDExtract(suffix_list_urls=())


class Security:
    """Domain validator for the `{domain}` path segment.

    Behavior:
    - Any host under a known public suffix is accepted, subdomains included
      (`example.com`, `www.example.co.uk`); sites are graded per host name.
    - Internationalized names (`bücher.de`) are checked in their punycode form
      and kept as unicode.
    - Rejects IP addresses, credentials, ports and hosts without a suffix.
    - Uses tldextract for TLD handling and validators.domain for format validation.
    """

    def normalize(self, domain: str) -> str:
        """Return the lowercase host name for `domain` or raise InvalidDomainFormatError."""
        if not domain or not isinstance(domain, str):
            raise InvalidDomainFormatError(str(domain))

        raw = domain.strip().lower().rstrip('.')
        # credentials and ports never belong to a site key
        if not raw or '@' in raw or ':' in raw:
            raise InvalidDomainFormatError(domain)

        try:
            extracted = _extract(raw)
        except Exception:
            raise InvalidDomainFormatError(domain)

        # Reject if domain or suffix is empty (bare TLDs, IP addresses)
        if not extracted.domain or not extracted.suffix:
            raise InvalidDomainFormatError(domain)

        host = extracted.fqdn
        if host != raw:
            raise InvalidDomainFormatError(domain)

        # validators only understands ASCII labels, check the IDNA form
        try:
            if validate_domain(host.encode("idna").decode("ascii")) is not True:
                raise InvalidDomainFormatError(domain)
        except (ValidationError, UnicodeError):
            raise InvalidDomainFormatError(domain)
        return host

