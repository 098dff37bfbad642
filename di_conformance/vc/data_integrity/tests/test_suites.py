from datetime import datetime, timedelta, timezone
from unittest import IsolatedAsyncioTestCase

import pytest

from ....config.base import ConfigurationError
from ....messaging.valid import XMLSCHEMA_DATETIME_VALIDATE
from ....vc_generator.error import GenerationFailure
from ....wallet.key_pair import Ed25519KeyPair, Signer
from ..cryptosuites import EddsaJcs2022
from ..resolver import load_cryptosuite, resolve_suites
from ..suites import SelectiveSuite, StandardSuite, format_created

CREDENTIAL = {
    "@context": ["https://www.w3.org/ns/credentials/v2"],
    "id": "urn:uuid:86294362-4254-4f36-854f-3952fe42555d",
    "type": ["VerifiableCredential"],
    "issuer": "did:key:z6MkexampleIssuer",
    "credentialSubject": {"id": "did:example:subject", "name": "Jane", "age": 42},
}


def test_format_created():
    assert (
        format_created(datetime(2023, 5, 1, 12, 0, 0, 999999, tzinfo=timezone.utc))
        == "2023-05-01T12:00:00Z"
    )
    assert (
        format_created(
            datetime(2023, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        )
        == "2023-05-01T12:00:00Z"
    )
    assert format_created("2020-01-01T00:00:00Z") == "2020-01-01T00:00:00Z"
    XMLSCHEMA_DATETIME_VALIDATE(format_created())


def test_load_cryptosuite():
    suite = EddsaJcs2022()
    assert load_cryptosuite(suite) is suite
    assert isinstance(load_cryptosuite("eddsa-jcs-2022"), EddsaJcs2022)
    with pytest.raises(ConfigurationError):
        load_cryptosuite("bbs-2023")


class TestSignatureSuite(IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.key = Ed25519KeyPair.from_seed("00000000000000000000000000000000")
        self.suites = resolve_suites(
            cryptosuite=EddsaJcs2022(),
            signer=self.key.signer(),
            verify=True,
            date="2023-05-01T12:00:00Z",
        )

    async def test_resolve(self):
        assert isinstance(self.suites.suite, StandardSuite)
        assert self.suites.selective_suite is None

        suites = resolve_suites(
            cryptosuite="eddsa-jcs-2022",
            signer=self.key.signer(),
            mandatory_pointers=["/issuer"],
            selective_pointers=["/credentialSubject/name"],
        )
        assert isinstance(suites.selective_suite, SelectiveSuite)
        assert suites.selective_suite.mandatory_pointers == ["/issuer"]

    async def test_sign_single_proof(self):
        signed = await self.suites.suite.sign(CREDENTIAL)
        assert "proof" not in CREDENTIAL
        proof = signed["proof"]
        assert isinstance(proof, dict)
        assert proof["type"] == "DataIntegrityProof"
        assert proof["cryptosuite"] == "eddsa-jcs-2022"
        assert proof["created"] == "2023-05-01T12:00:00Z"
        assert proof["verificationMethod"] == self.key.id
        assert proof["proofPurpose"] == "assertionMethod"
        assert proof["id"].startswith("urn:uuid:")
        assert await self.suites.suite.verify(signed)

    async def test_sign_overrides(self):
        signed = await self.suites.suite.sign(
            CREDENTIAL, proof={"created": None, "domain": "example.com"}
        )
        assert "created" not in signed["proof"]
        assert signed["proof"]["domain"] == "example.com"
        assert await self.suites.suite.verify(signed)

    async def test_proof_set(self):
        signed = await self.suites.suite.sign(CREDENTIAL)
        signed = await self.suites.suite.sign(signed)
        assert isinstance(signed["proof"], list)
        assert len(signed["proof"]) == 2
        assert "previousProof" not in signed["proof"][1]
        assert await self.suites.suite.verify(signed)

    async def test_proof_chain(self):
        signed = await self.suites.suite.sign(CREDENTIAL)
        chained = await self.suites.suite.sign(signed, chain=True)
        first, second = chained["proof"]
        assert second["previousProof"] == first["id"]
        assert await self.suites.suite.verify(chained)

        # the chained proof covers the earlier one
        first["created"] = "2024-01-01T00:00:00Z"
        assert not await self.suites.suite.verify(chained)

    async def test_chain_without_proof(self):
        with self.assertRaises(GenerationFailure):
            await self.suites.suite.sign(CREDENTIAL, chain=True)

    async def test_sign_x(self):
        with self.assertRaises(GenerationFailure):
            await self.suites.suite.sign(dict(CREDENTIAL, proof="not-a-proof"))
        with self.assertRaises(GenerationFailure):
            await self.suites.suite.sign(CREDENTIAL, proof={"type": "Ed25519Signature2020"})

    async def test_verify_flag_rejects_bad_signer(self):
        async def bad_sign(data):
            return b"\x00" * 64

        suites = resolve_suites(
            cryptosuite=EddsaJcs2022(),
            signer=Signer(self.key.id, bad_sign),
            verify=True,
        )
        with self.assertRaises(GenerationFailure):
            await suites.suite.sign(CREDENTIAL)

        unverified = resolve_suites(
            cryptosuite=EddsaJcs2022(), signer=Signer(self.key.id, bad_sign)
        )
        signed = await unverified.suite.sign(CREDENTIAL)
        assert not await unverified.suite.verify(signed)

    async def test_derive(self):
        suites = resolve_suites(
            cryptosuite=EddsaJcs2022(),
            signer=self.key.signer(),
            mandatory_pointers=["/issuer"],
            selective_pointers=["/credentialSubject/name"],
            verify=True,
        )
        base = await suites.selective_suite.sign(CREDENTIAL)
        derived = await suites.selective_suite.derive(base)
        assert derived["issuer"] == CREDENTIAL["issuer"]
        assert derived["credentialSubject"] == {
            "id": "did:example:subject",
            "name": "Jane",
        }
        assert isinstance(derived["proof"], dict)
        assert derived["proof"]["id"] != base["proof"]["id"]
        assert await suites.selective_suite.verify(derived)

        with self.assertRaises(GenerationFailure):
            await suites.selective_suite.derive(base, ["/credentialSubject/missing"])
