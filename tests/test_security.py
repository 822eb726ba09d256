import pytest

from sitegrades.core.exceptions.exceptions import InvalidDomainFormatError
from sitegrades.middleware.security import Security


@pytest.fixture
def sec():
    return Security()


@pytest.mark.parametrize("domain", [
    "example.com",
    "example.com.ar",
    "www.example.co.uk",
    "api.dev.example.io",
    "bücher.de",
    "xn--bcher-kva.de",
])
def test_valid_domains(sec, domain):
    assert sec.normalize(domain) == domain


@pytest.mark.parametrize("domain", [
    "",
    "   ",
    "localhost",
    "com",
    "192.168.0.1",
    "user:pass@example.com",
    "example.com:8443",
    "not_a_domain",
    "exa mple.com",
])
def test_invalid_domains(sec, domain):
    with pytest.raises(InvalidDomainFormatError):
        sec.normalize(domain)


def test_normalize_lowercases_and_strips(sec):
    assert sec.normalize("  Example.COM. ") == "example.com"
    assert sec.normalize("BÜCHER.de") == "bücher.de"
