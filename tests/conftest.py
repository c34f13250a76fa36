import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from factories import ISSUER, KID, MARKETPLACE_ID, claims_input, make_entry

from zably_contracts.install_ticket.issuer import SigningMaterial, TicketIssuer
from zably_contracts.install_ticket.keys import StaticKeyResolver
from zably_contracts.install_ticket.registry import TrustRegistry
from zably_contracts.install_ticket.verifier import TicketVerifier


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def signing_key(rsa_private_key: rsa.RSAPrivateKey) -> SigningMaterial:
    return SigningMaterial(
        kid=KID,
        algorithm="RS256",
        marketplace_id=MARKETPLACE_ID,
        private_key=rsa_private_key,
    )


@pytest.fixture
def registry() -> TrustRegistry:
    return TrustRegistry([make_entry()])


@pytest.fixture
def key_resolver(rsa_private_key: rsa.RSAPrivateKey) -> StaticKeyResolver:
    return StaticKeyResolver({(ISSUER, KID): rsa_private_key.public_key()})


@pytest.fixture
def issuer() -> TicketIssuer:
    return TicketIssuer(clock=lambda: 1000)


@pytest.fixture
def verifier(key_resolver: StaticKeyResolver) -> TicketVerifier:
    return TicketVerifier(key_resolver=key_resolver, validator_service="os-test")


@pytest.fixture
def ticket(issuer: TicketIssuer, signing_key: SigningMaterial) -> str:
    return issuer.issue(claims_input(), signing_key)
